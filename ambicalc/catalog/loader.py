"""Load provider/region/instance pricing catalogs from JSON and answer price lookups."""
import json
import logging
import os
from pathlib import Path
from typing import Any

_LOG = logging.getLogger(__name__)

_CATALOG_DIR = Path(__file__).resolve().parent
_PROVIDERS_CACHE: dict[tuple[str, str], dict] = {}

HOURS_PER_MONTH = 730

# Calculator provider name -> catalog file id
PROVIDERS = {"AWS": "aws", "Azure": "azure", "GCP": "gcp"}


class CatalogUnavailable(RuntimeError):
    """Pricing catalog for a known provider could not be read."""


def _catalog_dir() -> Path:
    raw = (os.environ.get("AMBICALC_CATALOG_DIR") or "").strip()
    return Path(raw) if raw else _CATALOG_DIR


def _load_provider(provider_id: str) -> dict | None:
    base = _catalog_dir()
    cache_key = (str(base), provider_id)
    if cache_key in _PROVIDERS_CACHE:
        return _PROVIDERS_CACHE[cache_key]
    path = base / f"{provider_id}.json"
    if not path.is_file():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        data["id"] = data.get("id", provider_id)
        _PROVIDERS_CACHE[cache_key] = data
        return data
    except (json.JSONDecodeError, OSError) as e:
        _LOG.warning("Pricing catalog %s unreadable: %s", path, e)
        return None


def _provider_id(provider: str) -> str:
    """Accept calculator names (AWS) or catalog ids (aws)."""
    if provider in PROVIDERS:
        return PROVIDERS[provider]
    if provider in PROVIDERS.values():
        return provider
    raise ValueError(f"provider must be one of: {', '.join(PROVIDERS)}")


def get_providers() -> list[dict[str, Any]]:
    """Return list of { id, name } for providers with a readable catalog."""
    result = []
    for name, pid in PROVIDERS.items():
        p = _load_provider(pid)
        if p:
            result.append({"id": name, "name": p.get("name", name)})
    return result


def get_regions(provider: str) -> list[dict[str, Any]]:
    """Return list of { id, name } for the given provider. Empty if no catalog."""
    p = _load_provider(_provider_id(provider))
    if not p:
        return []
    regions = p.get("regions") or []
    return [{"id": r.get("id", ""), "name": r.get("name", r.get("id", ""))} for r in regions]


def _monthly(hourly: Any) -> float | None:
    if not isinstance(hourly, (int, float)) or hourly <= 0:
        return None
    return round(hourly * HOURS_PER_MONTH, 2)


def get_instance_types(provider: str, region: str | None = None) -> list[dict[str, Any]]:
    """
    Return instance types for provider, with monthly on-demand price for region (0 if not listed).
    Each item: { id, cores, memory_gb, monthly_usd }.
    """
    p = _load_provider(_provider_id(provider))
    if not p:
        return []
    out = []
    for i in p.get("instance_types") or []:
        prices = i.get("prices") or {}
        monthly = _monthly(prices.get(region)) if region else None
        out.append({
            "id": i.get("id", ""),
            "cores": int(i.get("cores", 0)),
            "memory_gb": float(i.get("memory_gb", 0)),
            "monthly_usd": monthly or 0.0,
        })
    return out


def lookup_prices(
    provider: str,
    instance_types: list[str],
    regions: list[str],
) -> dict[str, dict[str, float]]:
    """
    Monthly on-demand prices for specific instance types: { type: { region: monthly_usd } }.
    Empty regions means every region in the catalog. Types or regions without a
    positive price are left out; callers keep those buckets at 0 for manual entry.
    """
    pid = _provider_id(provider)
    p = _load_provider(pid)
    if p is None:
        raise CatalogUnavailable(f"No pricing catalog for {provider}")
    index = {i.get("id", ""): i.get("prices") or {} for i in p.get("instance_types") or []}

    result: dict[str, dict[str, float]] = {}
    for t in instance_types:
        type_prices = index.get(t)
        if not type_prices:
            continue
        wanted = regions or list(type_prices)
        filtered = {}
        for r in wanted:
            monthly = _monthly(type_prices.get(r))
            if monthly is not None:
                filtered[r] = monthly
        if filtered:
            result[t] = filtered
    return result
