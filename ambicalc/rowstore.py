"""
In-memory working set for one calculator session.

Rows get sequential ids from the store that holds them; instance prices are
re-derived from the full node set on every node change, keeping prices by key.
Nothing here is persisted.
"""
import itertools
import logging

from ambicalc.cost_model import compute
from ambicalc.models import (
    CalculatorConfig,
    ImportJobStatus,
    InstancePrice,
    NamespaceRow,
    NodeRow,
    Results,
)
from ambicalc.parsing import parse_namespace_rows, parse_node_rows
from ambicalc.pricing import apply_price_lookup, derive_instance_prices

_LOG = logging.getLogger(__name__)


class RowStore:
    """Namespace rows, node rows and instance prices, addressed by store-assigned ids."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._namespaces: dict[int, NamespaceRow] = {}
        self._nodes: dict[int, NodeRow] = {}
        self._prices: list[InstancePrice] = []

    @property
    def namespace_rows(self) -> list[NamespaceRow]:
        return list(self._namespaces.values())

    @property
    def node_rows(self) -> list[NodeRow]:
        return list(self._nodes.values())

    @property
    def instance_prices(self) -> list[InstancePrice]:
        return list(self._prices)

    def namespace_items(self) -> list[tuple[int, NamespaceRow]]:
        return list(self._namespaces.items())

    def node_items(self) -> list[tuple[int, NodeRow]]:
        return list(self._nodes.items())

    def add_namespace_rows(self, rows: list[NamespaceRow]) -> list[int]:
        ids = []
        for row in rows:
            row_id = next(self._ids)
            self._namespaces[row_id] = row
            ids.append(row_id)
        return ids

    def add_node_rows(self, rows: list[NodeRow]) -> list[int]:
        ids = []
        for row in rows:
            row_id = next(self._ids)
            self._nodes[row_id] = row
            ids.append(row_id)
        if ids:
            self._rederive()
        return ids

    def import_namespace_text(self, text: str) -> list[int]:
        """Parse pasted namespace TSV and append it (repeat imports append, never merge)."""
        return self.add_namespace_rows(parse_namespace_rows(text))

    def import_node_text(self, text: str) -> list[int]:
        return self.add_node_rows(parse_node_rows(text))

    def remove_namespace_row(self, row_id: int) -> None:
        del self._namespaces[row_id]

    def remove_node_row(self, row_id: int) -> None:
        del self._nodes[row_id]
        self._rederive()

    def clear_namespaces(self) -> None:
        self._namespaces.clear()

    def clear_nodes(self) -> None:
        self._nodes.clear()
        self._rederive()

    def set_price(self, key: str, monthly_price: float) -> None:
        """Set the monthly price of one instance bucket. Unknown key raises KeyError."""
        for i, p in enumerate(self._prices):
            if p.key == key:
                self._prices[i] = InstancePrice.model_validate(
                    {**p.model_dump(), "monthly_price": monthly_price}
                )
                return
        raise KeyError(key)

    def apply_price_lookup(self, lookup: dict[str, dict[str, float]]) -> int:
        """Fill unpriced buckets from a pricing lookup; returns how many were filled."""
        self._prices, filled = apply_price_lookup(self._prices, lookup)
        return filled

    def merge_import_job(self, job: ImportJobStatus) -> int:
        """
        Append the row batches of a completed bulk-import job.
        Processing or failed jobs leave the store unchanged. Returns rows merged.
        """
        if job.status != "completed":
            if job.status == "failed":
                _LOG.warning("Bulk import failed: %s", job.error or "unknown error")
            return 0
        namespace_rows = [ns for batch in job.results for ns in batch.namespace_rows]
        nodes = [n for batch in job.results for n in batch.nodes]
        self.add_namespace_rows(namespace_rows)
        self.add_node_rows(nodes)
        _LOG.info(
            "Merged bulk import: batches=%s namespaces=%s nodes=%s",
            len(job.results), len(namespace_rows), len(nodes),
        )
        return len(namespace_rows) + len(nodes)

    def compute(self, config: CalculatorConfig) -> Results | None:
        return compute(config, self.namespace_rows, self.node_rows, self._prices)

    def _rederive(self) -> None:
        self._prices = derive_instance_prices(self.node_rows, self._prices)
