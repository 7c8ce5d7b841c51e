"""Input/output types for the Ambient Ready Calculator."""
from typing import Annotated, Literal, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field

# Accepted magnitude range for imported quantities and prices. Smaller non-zero
# values are flushed to 0 so every ratio and product in compute() stays finite.
MAX_INPUT_VALUE = 1e9
MIN_INPUT_MAGNITUDE = 1e-6


def _flush_tiny(value: float) -> float:
    return 0.0 if abs(value) < MIN_INPUT_MAGNITUDE else value


Quantity = Annotated[float, Field(ge=-MAX_INPUT_VALUE, le=MAX_INPUT_VALUE), AfterValidator(_flush_tiny)]
NonNegativeQuantity = Annotated[float, Field(ge=0, le=MAX_INPUT_VALUE), AfterValidator(_flush_tiny)]


class NamespaceRow(BaseModel):
    """One cluster+namespace observation (14 import columns)."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    cluster: str = ""
    namespace: str = ""
    services: Quantity = Field(0, description="Service count")
    pods: Quantity = Field(0, description="Pod count")
    containers: Quantity = Field(0, description="Container count")
    req_cores: Quantity = Field(0, description="Workload CPU requests (cores)")
    req_mem: Quantity = Field(0, description="Workload memory requests (GiB)")
    limit_cores: Quantity = Field(0, description="Workload CPU limits (cores)")
    limit_mem: Quantity = Field(0, description="Workload memory limits (GiB)")
    sidecar_proxies: Quantity = Field(0, description="Sidecar proxy instances in the namespace")
    sidecar_req_cpu: Quantity = Field(0, description="CPU requested by sidecars (cores)")
    sidecar_req_mem: Quantity = Field(0, description="Memory requested by sidecars (GiB)")
    sidecar_limit_cpu: Quantity = Field(0, description="CPU limit of sidecars (cores)")
    sidecar_limit_mem: Quantity = Field(0, description="Memory limit of sidecars (GiB)")


class NodeRow(BaseModel):
    """One physical/virtual node (10 import columns)."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    cluster: str = ""
    name: str = ""
    type: str = Field("", description="Instance type / SKU, e.g. m5.xlarge")
    region: str = ""
    zone: str = ""
    cpus: Quantity = Field(0, description="Cores per node")
    memory: Quantity = Field(0, description="Memory per node (GiB)")
    k8s_version: str = ""
    os: str = ""
    arch: str = ""


class InstancePrice(BaseModel):
    """Priceable bucket of nodes sharing (type, region)."""
    model_config = ConfigDict(allow_inf_nan=False)

    key: str = Field(..., description='"{type}|{region}"')
    type: str = ""
    region: str = ""
    cpus: Quantity = Field(0, description="Cores per instance (first node seen with this key)")
    count: int = Field(0, ge=0, le=int(MAX_INPUT_VALUE), description="Nodes sharing the key")
    monthly_price: NonNegativeQuantity = Field(0, description="On-demand USD per instance per month; 0 = unpriced")


class CalculatorConfig(BaseModel):
    """Scenario parameters."""
    model_config = ConfigDict(allow_inf_nan=False)

    customer_name: str = Field("", max_length=200)
    cloud_provider: Literal["AWS", "Azure", "GCP"] = "AWS"
    waypoint_replicas: int = Field(3, ge=1, le=1000, description="Waypoint replicas per namespace")
    ztunnel_tax: float = Field(0.3, ge=0, le=64, description="Cores reserved per node for ztunnel")
    fleet_rps: NonNegativeQuantity = Field(0, description="Peak fleet RPS; > 0 enables the shared waypoint scenario")
    discount_pct: float = Field(5, ge=0, le=100, description="Discount applied to on-demand pricing (%)")


class BasisFigures(BaseModel):
    """One model on one accounting basis."""
    model_config = ConfigDict(allow_inf_nan=False)

    cores: float
    annual_cost: float
    savings: float = 0
    reduction_pct: float = 0


class ScenarioFigures(BaseModel):
    """One model on both the reserved (requests) and limit bases."""
    model_config = ConfigDict(allow_inf_nan=False)

    reserved: BasisFigures
    limit: BasisFigures


class RoiRow(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    year: int
    cum_investment: float
    cum_savings: float
    roi: float


class Breakeven(BaseModel):
    """Tagged breakeven: ``months`` is set only when kind == "months"."""
    model_config = ConfigDict(allow_inf_nan=False)

    kind: Literal["months", "never"]
    months: Optional[float] = None

    @property
    def is_never(self) -> bool:
        return self.kind == "never"


class Results(BaseModel):
    """Full cost comparison; recomputed from scratch on every input change."""
    model_config = ConfigDict(allow_inf_nan=False)

    total_clusters: int
    total_nodes: int
    total_namespaces: int
    total_pods: float
    total_services: float
    namespaces_with_sidecars: int
    total_cpus: float
    total_monthly_spend: float
    avg_cores_per_instance: float
    avg_cost_per_core_monthly: float
    annual_cost_per_core: float
    ztunnel_cores: float
    envoy_reduction_pct: float
    avg_pods_per_namespace: float
    sidecar: ScenarioFigures
    waypoint: ScenarioFigures
    has_shared_data: bool = False
    shared: Optional[ScenarioFigures] = None
    shared_waypoint_cores: Optional[float] = None
    roi_rows: list[RoiRow] = Field(default_factory=list)
    breakeven: Breakeven


class ImportBatch(BaseModel):
    """Rows parsed from one diagnostic bundle by the bulk-import job."""
    cluster_name: str = ""
    namespace_rows: list[NamespaceRow] = Field(default_factory=list)
    nodes: list[NodeRow] = Field(default_factory=list)


class ImportJobStatus(BaseModel):
    """Status payload of the background bulk-import job."""
    status: Literal["processing", "completed", "failed"]
    links_total: int = 0
    links_processed: int = 0
    results: list[ImportBatch] = Field(default_factory=list)
    error: Optional[str] = None


class ParseRequest(BaseModel):
    """Request body for /v1/parse/*."""
    text: str = Field(..., max_length=5_000_000)


class DeriveRequest(BaseModel):
    """Request body for /v1/instance-prices."""
    nodes: list[NodeRow] = Field(default_factory=list)
    existing_prices: list[InstancePrice] = Field(default_factory=list)


class CalculatorRequest(BaseModel):
    """Request body for /v1/compute and /v1/report."""
    config: CalculatorConfig = Field(default_factory=CalculatorConfig)
    namespace_rows: list[NamespaceRow] = Field(default_factory=list)
    node_rows: list[NodeRow] = Field(default_factory=list)
    instance_prices: list[InstancePrice] = Field(default_factory=list)


class ComputeResponse(BaseModel):
    """Response from /v1/compute; results is null when there is not enough data."""
    results: Optional[Results] = None
