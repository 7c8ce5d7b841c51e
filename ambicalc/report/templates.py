"""Report section builders (text/structure for the PDF export)."""
import re
from datetime import date

from ambicalc.cost_model import RPS_PER_WAYPOINT_CORE
from ambicalc.models import CalculatorConfig, Results
from ambicalc.roi import ANNUAL_INVESTMENT_USD

REPORT_VERSION = "0.1.0"
NO_VALUE = "--"


def fmt_num(n: float, decimals: int = 2) -> str:
    return f"{n:,.{decimals}f}"


def fmt_currency(n: float) -> str:
    """Whole dollars; millions shortened to one decimal ($1.2M)."""
    if abs(n) >= 1_000_000:
        return f"${n / 1_000_000:.1f}M"
    return f"${n:,.0f}"


def fmt_pct(n: float) -> str:
    return f"{n * 100:.1f}%"


def report_metadata(config: CalculatorConfig) -> dict:
    """Title, subtitle and footer strings."""
    today = date.today().strftime("%B %d, %Y")
    return {
        "title": "Ambient Ready Calculator",
        "subtitle": "  |  ".join([config.customer_name or "Unnamed Customer", config.cloud_provider, today]),
        "date": today,
        "report_version": REPORT_VERSION,
    }


def report_filename(config: CalculatorConfig) -> str:
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", config.customer_name).strip("-").lower()
    return f"ambient-ready-{slug or 'calculator'}.pdf"


def has_pricing(results: Results) -> bool:
    """Cost figures are only meaningful once at least one instance bucket is priced."""
    return results.avg_cost_per_core_monthly > 0


def summary_stats(results: Results) -> list[list[str]]:
    """Header row + one value row of inventory totals."""
    return [
        ["Clusters", "Nodes", "Namespaces", "Pods", "Services", "Avg Cores/Instance", "Avg $/Core/Mo"],
        [
            str(results.total_clusters),
            str(results.total_nodes),
            str(results.total_namespaces),
            fmt_num(results.total_pods, 0),
            fmt_num(results.total_services, 0),
            fmt_num(results.avg_cores_per_instance, 1),
            "$" + fmt_num(results.avg_cost_per_core_monthly) if has_pricing(results) else NO_VALUE,
        ],
    ]


def reduction_highlight(results: Results) -> str | None:
    """Headline "X% to Y% reduction" range, or None without pricing."""
    if not has_pricing(results):
        return None
    wp = results.waypoint
    low = min(wp.reserved.reduction_pct, wp.limit.reduction_pct)
    if results.shared is not None:
        high = max(results.shared.reserved.reduction_pct, results.shared.limit.reduction_pct)
    else:
        high = max(wp.reserved.reduction_pct, wp.limit.reduction_pct)
    return f"{fmt_pct(low)} to {fmt_pct(high)} reduction in Istio CPU cost"


def cost_comparison_rows(results: Results) -> list[list[str]]:
    """
    One row per model: label, then cores / annual cost / savings for the
    reserved basis followed by the limit basis. The sidecar row has no savings.
    """
    sc = results.sidecar
    rows = [[
        "Sidecars (current)",
        fmt_num(sc.reserved.cores), fmt_currency(sc.reserved.annual_cost), NO_VALUE,
        fmt_num(sc.limit.cores), fmt_currency(sc.limit.annual_cost), NO_VALUE,
    ]]
    models = [("Ambient: Waypoint per N/S", results.waypoint)]
    if results.shared is not None:
        models.append(("Ambient: Shared Waypoints", results.shared))
    for label, m in models:
        rows.append([
            f"{label} ({fmt_pct(m.reserved.reduction_pct)} / {fmt_pct(m.limit.reduction_pct)})",
            fmt_num(m.reserved.cores), fmt_currency(m.reserved.annual_cost), fmt_currency(m.reserved.savings),
            fmt_num(m.limit.cores), fmt_currency(m.limit.annual_cost), fmt_currency(m.limit.savings),
        ])
    return rows


def assumptions_section(config: CalculatorConfig, results: Results) -> list[str]:
    """Bullets describing the scenario inputs behind the figures."""
    avg_pods = fmt_num(results.avg_pods_per_namespace, 1)
    items = [
        f"Waypoint replicas per namespace: {config.waypoint_replicas}",
        f"Ztunnel DaemonSet tax: {config.ztunnel_tax:g} cores/node "
        f"({fmt_num(results.ztunnel_cores)} cores total across {results.total_nodes} nodes)",
        f"Avg pods per namespace: {avg_pods}",
        f"Envoy reduction factor: {fmt_pct(results.envoy_reduction_pct)} "
        f"(replaces {avg_pods} sidecars with {config.waypoint_replicas} waypoint replicas)",
    ]
    if results.shared_waypoint_cores is not None:
        items.append(
            f"Shared waypoint throughput: {RPS_PER_WAYPOINT_CORE:,} RPS per core "
            f"({config.fleet_rps:,.0f} fleet RPS = {fmt_num(results.shared_waypoint_cores)} waypoint cores)"
        )
    items.append(f"Instance pricing discount: {config.discount_pct:g}%")
    items.append("Cost model: per-core cost derived from weighted average across all instance types")
    return items


def roi_section(results: Results) -> dict | None:
    """ROI note and table rows, or None without pricing."""
    if not has_pricing(results) or not results.roi_rows:
        return None
    note = (
        f"Based on ${ANNUAL_INVESTMENT_USD / 1000:,.0f}K/year license investment "
        "and waypoint-per-namespace savings (reserved)."
    )
    if not results.breakeven.is_never:
        note += f" Breakeven in {fmt_num(results.breakeven.months, 1)} months."
    rows = [["Year", "Cumulative Investment", "Cumulative Savings", "ROI"]]
    for r in results.roi_rows:
        rows.append([f"Year {r.year}", fmt_currency(r.cum_investment), fmt_currency(r.cum_savings), fmt_pct(r.roi)])
    return {"note": note, "rows": rows, "positive": [r.roi >= 1 for r in results.roi_rows]}
