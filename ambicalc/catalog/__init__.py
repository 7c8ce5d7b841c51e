"""On-demand instance pricing catalogs per cloud provider (JSON, hourly USD per region)."""
from ambicalc.catalog.loader import (
    CatalogUnavailable,
    HOURS_PER_MONTH,
    PROVIDERS,
    get_providers,
    get_regions,
    get_instance_types,
    lookup_prices,
)

__all__ = [
    "CatalogUnavailable",
    "HOURS_PER_MONTH",
    "PROVIDERS",
    "get_providers",
    "get_regions",
    "get_instance_types",
    "lookup_prices",
]
