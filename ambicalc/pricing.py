"""Instance price buckets: group nodes by (type, region) and carry prices across re-derivation."""
import math

from ambicalc.models import MAX_INPUT_VALUE, MIN_INPUT_MAGNITUDE, NodeRow, InstancePrice


def price_key(instance_type: str, region: str) -> str:
    return f"{instance_type}|{region}"


def group_nodes(nodes: list[NodeRow]) -> list[InstancePrice]:
    """
    One unpriced bucket per distinct type|region, in first-seen order.
    cpus comes from the first node with the key; count is the group size.
    """
    groups: dict[str, dict] = {}
    for n in nodes:
        key = price_key(n.type, n.region)
        g = groups.get(key)
        if g:
            g["count"] += 1
        else:
            groups[key] = {"type": n.type, "region": n.region, "cpus": n.cpus, "count": 1}
    return [InstancePrice(key=key, **g) for key, g in groups.items()]


def merge_prices(groups: list[InstancePrice], previous: list[InstancePrice]) -> list[InstancePrice]:
    """Keep monthly_price of keys already priced in previous; new keys start at 0."""
    existing = {p.key: p.monthly_price for p in previous}
    return [g.model_copy(update={"monthly_price": existing.get(g.key, 0.0)}) for g in groups]


def derive_instance_prices(nodes: list[NodeRow], existing: list[InstancePrice]) -> list[InstancePrice]:
    """Re-derive the full bucket list from scratch; safe to call on every node-set change."""
    return merge_prices(group_nodes(nodes), existing)


def apply_price_lookup(
    prices: list[InstancePrice],
    lookup: dict[str, dict[str, float]],
) -> tuple[list[InstancePrice], int]:
    """
    Fill unpriced buckets from a type -> region -> monthly price mapping.
    Entries already priced are left alone; missing or out-of-range lookups stay at 0.
    Returns (new list, number of buckets filled).
    """
    out = []
    filled = 0
    for p in prices:
        if p.monthly_price == 0:
            price = (lookup.get(p.type) or {}).get(p.region)
            if price is not None and math.isfinite(price) and MIN_INPUT_MAGNITUDE <= price <= MAX_INPUT_VALUE:
                out.append(p.model_copy(update={"monthly_price": float(price)}))
                filled += 1
                continue
        out.append(p)
    return out, filled
