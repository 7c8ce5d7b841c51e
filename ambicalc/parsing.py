"""
Tab-separated inventory import (pure functions, no I/O).
Accepts pasted spreadsheet data with or without a header row.
"""
import math
import re

from ambicalc.models import MAX_INPUT_VALUE, NamespaceRow, NodeRow

NAMESPACE_COLUMNS = (
    "Cluster", "Namespace", "Services", "Pods", "Containers",
    "ReqCores", "ReqMem", "LimitCores", "LimitMem",
    "SidecarProxies", "SidecarReqCPU", "SidecarReqMem", "SidecarLimitCPU", "SidecarLimitMem",
)
NODE_COLUMNS = (
    "Cluster", "Name", "Type", "Region", "Zone", "CPUs", "Memory(GB)", "K8sVersion", "OS", "Arch",
)

# Leading decimal number, same prefix a browser parseFloat() accepts ("4 vCPU" -> 4)
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_num(value: str | None) -> float:
    """Numeric cell -> float; anything unparseable, non-finite or beyond MAX_INPUT_VALUE becomes 0."""
    if not value:
        return 0.0
    m = _NUMBER_PREFIX.match(value)
    if not m:
        return 0.0
    try:
        n = float(m.group(1))
    except ValueError:
        return 0.0
    return n if math.isfinite(n) and abs(n) <= MAX_INPUT_VALUE else 0.0


def is_header_row(line: str) -> bool:
    lower = line.lower()
    return lower.startswith("cluster") and ("namespace" in lower or "name" in lower)


def _data_lines(text: str) -> list[list[str]]:
    """Non-blank, non-header lines split into tab-separated cells."""
    out = []
    for line in text.strip().splitlines():
        if not line.strip() or is_header_row(line):
            continue
        out.append(line.split("\t"))
    return out


def _cell(cells: list[str], i: int) -> str:
    return cells[i].strip() if i < len(cells) else ""


def parse_namespace_rows(text: str) -> list[NamespaceRow]:
    """
    Parse namespace rows (14 columns, see NAMESPACE_COLUMNS).
    Missing trailing cells become "" / 0. Input order is kept; duplicates are not merged.
    """
    rows = []
    for c in _data_lines(text):
        rows.append(NamespaceRow(
            cluster=_cell(c, 0),
            namespace=_cell(c, 1),
            services=parse_num(_cell(c, 2)),
            pods=parse_num(_cell(c, 3)),
            containers=parse_num(_cell(c, 4)),
            req_cores=parse_num(_cell(c, 5)),
            req_mem=parse_num(_cell(c, 6)),
            limit_cores=parse_num(_cell(c, 7)),
            limit_mem=parse_num(_cell(c, 8)),
            sidecar_proxies=parse_num(_cell(c, 9)),
            sidecar_req_cpu=parse_num(_cell(c, 10)),
            sidecar_req_mem=parse_num(_cell(c, 11)),
            sidecar_limit_cpu=parse_num(_cell(c, 12)),
            sidecar_limit_mem=parse_num(_cell(c, 13)),
        ))
    return rows


def parse_node_rows(text: str) -> list[NodeRow]:
    """Parse node rows (10 columns, see NODE_COLUMNS)."""
    rows = []
    for c in _data_lines(text):
        rows.append(NodeRow(
            cluster=_cell(c, 0),
            name=_cell(c, 1),
            type=_cell(c, 2),
            region=_cell(c, 3),
            zone=_cell(c, 4),
            cpus=parse_num(_cell(c, 5)),
            memory=parse_num(_cell(c, 6)),
            k8s_version=_cell(c, 7),
            os=_cell(c, 8),
            arch=_cell(c, 9),
        ))
    return rows
