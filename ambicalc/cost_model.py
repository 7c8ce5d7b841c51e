"""Sidecar vs ambient cost model (pure functions)."""
import math

from ambicalc.models import (
    CalculatorConfig,
    NamespaceRow,
    NodeRow,
    InstancePrice,
    BasisFigures,
    ScenarioFigures,
    Results,
)
from ambicalc.roi import project_roi, breakeven

# Throughput one shared waypoint core is assumed to sustain (tunable product assumption)
RPS_PER_WAYPOINT_CORE = 3000


def _ratio(num: float, den: float) -> float:
    return num / den if den > 0 else 0.0


def _scenario_basis(sidecar: BasisFigures, cores: float, annual_cost_per_core: float) -> BasisFigures:
    """Cost, savings and reduction of an ambient model against the sidecar baseline on one basis."""
    cost = cores * annual_cost_per_core
    return BasisFigures(
        cores=cores,
        annual_cost=cost,
        savings=sidecar.annual_cost - cost,
        reduction_pct=1 - cores / sidecar.cores if sidecar.cores > 0 else 0.0,
    )


def _waypoint_cores(sidecar_cores: float, envoy_reduction_pct: float, ztunnel_cores: float) -> float:
    """
    ambient_reduction = sidecar_cores * envoy_reduction_pct - ztunnel_cores
    waypoint_cores = sidecar_cores - ambient_reduction
    """
    ambient_reduction = sidecar_cores * envoy_reduction_pct - ztunnel_cores
    return sidecar_cores - ambient_reduction


def compute(
    config: CalculatorConfig,
    namespace_rows: list[NamespaceRow],
    node_rows: list[NodeRow],
    instance_prices: list[InstancePrice],
) -> Results | None:
    """
    Full sidecar / waypoint-per-namespace / shared-waypoint comparison.
    Returns None when either row set is empty (not enough data to report).

    avg_cost_per_core_monthly = (monthly_spend / total_cpus) * (1 - discount)
    envoy_reduction_pct = (avg_pods_per_namespace - waypoint_replicas) / avg_pods_per_namespace
    ztunnel_cores = total_nodes * ztunnel_tax
    shared_cores = ztunnel_cores + fleet_rps / RPS_PER_WAYPOINT_CORE (both bases)
    """
    if not namespace_rows or not node_rows:
        return None

    # Inventory
    total_clusters = len({r.cluster for r in namespace_rows})
    total_nodes = len(node_rows)
    total_namespaces = len(namespace_rows)
    total_pods = math.fsum(r.pods for r in namespace_rows)
    total_services = math.fsum(r.services for r in namespace_rows)
    namespaces_with_sidecars = sum(1 for r in namespace_rows if r.sidecar_proxies > 0) or total_namespaces

    # Pricing
    total_cpus = math.fsum(p.cpus * p.count for p in instance_prices)
    total_monthly_spend = math.fsum(p.monthly_price * p.count for p in instance_prices)
    avg_cores_per_instance = _ratio(total_cpus, total_nodes)
    discount = config.discount_pct / 100
    avg_cost_per_core_monthly = (total_monthly_spend / total_cpus) * (1 - discount) if total_cpus > 0 else 0.0
    annual_cost_per_core = avg_cost_per_core_monthly * 12

    # Sidecar baseline
    sidecar_reserved = math.fsum(r.sidecar_req_cpu for r in namespace_rows)
    sidecar_limit = math.fsum(r.sidecar_limit_cpu for r in namespace_rows)
    sidecar = ScenarioFigures(
        reserved=BasisFigures(cores=sidecar_reserved, annual_cost=sidecar_reserved * annual_cost_per_core),
        limit=BasisFigures(cores=sidecar_limit, annual_cost=sidecar_limit * annual_cost_per_core),
    )

    # One sidecar per pod replaced by a fixed number of waypoint replicas per namespace
    avg_pods_per_namespace = _ratio(total_pods, namespaces_with_sidecars)
    envoy_reduction_pct = (
        (avg_pods_per_namespace - config.waypoint_replicas) / avg_pods_per_namespace
        if avg_pods_per_namespace > 0 else 0.0
    )
    ztunnel_cores = total_nodes * config.ztunnel_tax

    waypoint = ScenarioFigures(
        reserved=_scenario_basis(
            sidecar.reserved,
            _waypoint_cores(sidecar_reserved, envoy_reduction_pct, ztunnel_cores),
            annual_cost_per_core,
        ),
        limit=_scenario_basis(
            sidecar.limit,
            _waypoint_cores(sidecar_limit, envoy_reduction_pct, ztunnel_cores),
            annual_cost_per_core,
        ),
    )

    # Shared waypoints are throughput-bound, so reserved and limit collapse to one figure
    shared = None
    shared_waypoint_cores = None
    if config.fleet_rps > 0:
        shared_waypoint_cores = config.fleet_rps / RPS_PER_WAYPOINT_CORE
        shared_total = ztunnel_cores + shared_waypoint_cores
        shared = ScenarioFigures(
            reserved=_scenario_basis(sidecar.reserved, shared_total, annual_cost_per_core),
            limit=_scenario_basis(sidecar.limit, shared_total, annual_cost_per_core),
        )

    annual_savings = waypoint.reserved.savings
    return Results(
        total_clusters=total_clusters,
        total_nodes=total_nodes,
        total_namespaces=total_namespaces,
        total_pods=total_pods,
        total_services=total_services,
        namespaces_with_sidecars=namespaces_with_sidecars,
        total_cpus=total_cpus,
        total_monthly_spend=total_monthly_spend,
        avg_cores_per_instance=avg_cores_per_instance,
        avg_cost_per_core_monthly=avg_cost_per_core_monthly,
        annual_cost_per_core=annual_cost_per_core,
        ztunnel_cores=ztunnel_cores,
        envoy_reduction_pct=envoy_reduction_pct,
        avg_pods_per_namespace=avg_pods_per_namespace,
        sidecar=sidecar,
        waypoint=waypoint,
        has_shared_data=shared is not None,
        shared=shared,
        shared_waypoint_cores=shared_waypoint_cores,
        roi_rows=project_roi(annual_savings),
        breakeven=breakeven(annual_savings),
    )
