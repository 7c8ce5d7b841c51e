"""Tests for bundled pricing catalogs."""
import pytest

from ambicalc.catalog import (
    CatalogUnavailable,
    HOURS_PER_MONTH,
    get_instance_types,
    get_providers,
    get_regions,
    lookup_prices,
)


def test_providers():
    ids = [p["id"] for p in get_providers()]
    assert ids == ["AWS", "Azure", "GCP"]


def test_regions_accept_name_or_id():
    assert any(r["id"] == "us-east-1" for r in get_regions("AWS"))
    assert get_regions("aws") == get_regions("AWS")
    assert any(r["id"] == "westeurope" for r in get_regions("Azure"))


def test_unknown_provider():
    with pytest.raises(ValueError):
        get_regions("OCI")
    with pytest.raises(ValueError):
        lookup_prices("OCI", ["x"], [])


def test_instance_types_with_region():
    types = get_instance_types("AWS", "us-east-1")
    m5 = next(t for t in types if t["id"] == "m5.xlarge")
    assert m5["cores"] == 4
    assert m5["monthly_usd"] == round(0.192 * HOURS_PER_MONTH, 2)


def test_instance_types_without_region_are_unpriced():
    types = get_instance_types("GCP")
    assert types
    assert all(t["monthly_usd"] == 0 for t in types)


def test_lookup_prices():
    prices = lookup_prices("AWS", ["m5.xlarge", "not-a-type"], ["us-east-1", "mars-1"])
    assert prices == {"m5.xlarge": {"us-east-1": 140.16}}


def test_lookup_prices_all_regions():
    prices = lookup_prices("AWS", ["m5.xlarge"], [])
    assert set(prices["m5.xlarge"]) == {"us-east-1", "us-west-2", "eu-west-1"}


def test_lookup_prices_missing_catalog(tmp_path, monkeypatch):
    monkeypatch.setenv("AMBICALC_CATALOG_DIR", str(tmp_path))
    with pytest.raises(CatalogUnavailable):
        lookup_prices("AWS", ["m5.xlarge"], [])
    assert get_providers() == []


def test_lookup_prices_unreadable_catalog(tmp_path, monkeypatch):
    (tmp_path / "aws.json").write_text("{not json", encoding="utf-8")
    monkeypatch.setenv("AMBICALC_CATALOG_DIR", str(tmp_path))
    with pytest.raises(CatalogUnavailable):
        lookup_prices("AWS", ["m5.xlarge"], [])
