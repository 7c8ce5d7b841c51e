"""Tests for instance price buckets."""
from ambicalc.models import InstancePrice, NodeRow
from ambicalc.pricing import apply_price_lookup, derive_instance_prices, group_nodes, merge_prices, price_key


def _node(t, region, cpus=4):
    return NodeRow(cluster="c", name="n", type=t, region=region, cpus=cpus)


def test_price_key():
    assert price_key("m5.xlarge", "us-east-1") == "m5.xlarge|us-east-1"


def test_group_nodes_first_seen_order():
    nodes = [
        _node("m5.xlarge", "us-east-1", 4),
        _node("c5.2xlarge", "us-east-1", 8),
        _node("m5.xlarge", "us-east-1", 16),  # cpus of the first node wins
        _node("m5.xlarge", "us-west-2", 4),
    ]
    groups = group_nodes(nodes)
    assert [g.key for g in groups] == ["m5.xlarge|us-east-1", "c5.2xlarge|us-east-1", "m5.xlarge|us-west-2"]
    assert groups[0].count == 2
    assert groups[0].cpus == 4
    assert all(g.monthly_price == 0 for g in groups)


def test_group_nodes_empty():
    assert group_nodes([]) == []


def test_merge_keeps_prices_by_key():
    groups = group_nodes([_node("m5.xlarge", "us-east-1"), _node("r5.xlarge", "us-east-1")])
    previous = [
        InstancePrice(key="m5.xlarge|us-east-1", type="m5.xlarge", region="us-east-1", cpus=4, count=1, monthly_price=140.16),
        InstancePrice(key="gone|nowhere", type="gone", region="nowhere", cpus=2, count=1, monthly_price=50),
    ]
    merged = merge_prices(groups, previous)
    assert [p.key for p in merged] == ["m5.xlarge|us-east-1", "r5.xlarge|us-east-1"]
    assert merged[0].monthly_price == 140.16
    assert merged[1].monthly_price == 0


def test_derive_updates_counts():
    previous = derive_instance_prices([_node("m5.xlarge", "us-east-1")], [])
    previous = [previous[0].model_copy(update={"monthly_price": 100.0})]
    derived = derive_instance_prices([_node("m5.xlarge", "us-east-1")] * 3, previous)
    assert len(derived) == 1
    assert derived[0].count == 3
    assert derived[0].monthly_price == 100.0


def test_apply_price_lookup_fills_only_unpriced():
    prices = [
        InstancePrice(key="a|r1", type="a", region="r1", cpus=4, count=1, monthly_price=0),
        InstancePrice(key="b|r1", type="b", region="r1", cpus=4, count=1, monthly_price=99),
        InstancePrice(key="c|r1", type="c", region="r1", cpus=4, count=1, monthly_price=0),
        InstancePrice(key="d|r1", type="d", region="r1", cpus=4, count=1, monthly_price=0),
    ]
    lookup = {"a": {"r1": 120.0}, "b": {"r1": 10.0}, "d": {"r1": 0.0}}
    out, filled = apply_price_lookup(prices, lookup)
    assert filled == 1
    assert [p.monthly_price for p in out] == [120.0, 99, 0, 0]
    # Input untouched
    assert prices[0].monthly_price == 0


def test_apply_price_lookup_ignores_out_of_range_prices():
    prices = [InstancePrice(key="a|r1", type="a", region="r1", cpus=4, count=1)]
    for bad in (1e12, float("inf"), float("nan"), 1e-9):
        out, filled = apply_price_lookup(prices, {"a": {"r1": bad}})
        assert filled == 0
        assert out[0].monthly_price == 0
