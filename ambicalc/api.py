"""FastAPI routes for the Ambient Ready Calculator."""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from ambicalc.auth import is_demo_enabled, require_report_auth
from ambicalc.catalog import (
    CatalogUnavailable,
    PROVIDERS,
    get_providers,
    get_regions,
    get_instance_types,
    lookup_prices,
)
from ambicalc.cost_model import compute
from ambicalc.models import (
    CalculatorRequest,
    ComputeResponse,
    DeriveRequest,
    InstancePrice,
    NamespaceRow,
    NodeRow,
    ParseRequest,
)
from ambicalc.observability import RequestLoggingMiddleware, get_metrics_text, record_computation
from ambicalc.parsing import parse_namespace_rows, parse_node_rows
from ambicalc.pricing import derive_instance_prices
from ambicalc.report.pdf import generate_report_pdf
from ambicalc.report.templates import report_filename
from ambicalc.resilience import run_sync_with_timeout, get_report_timeout_sec
from ambicalc.security import RateLimitMiddleware, check_demo_in_production

_LOG = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    raw = (os.environ.get("AMBICALC_CORS_ORIGINS") or "").strip()
    if not raw:
        return []
    if raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


def _split_csv(raw: str | None) -> list[str]:
    return [v.strip() for v in (raw or "").split(",") if v.strip()]


@asynccontextmanager
async def lifespan(_app: FastAPI):
    check_demo_in_production()
    yield


app = FastAPI(
    title="Ambient Ready Calculator",
    description="Sidecar vs ambient mesh infrastructure cost and ROI model",
    version="0.1.0",
    lifespan=lifespan,
)
origins = _cors_origins()
if origins:
    app.add_middleware(CORSMiddleware, allow_origins=origins, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)


@app.get("/v1/health")
def health():
    """Health check. Includes demo_available when AMBICALC_DEMO=1 (dev only)."""
    out = {"status": "ok", "service": "ambicalc"}
    if is_demo_enabled():
        out["demo_available"] = True
    return out


@app.get("/v1/metrics")
def metrics():
    """Prometheus-style metrics (request counts, computations, uptime)."""
    return PlainTextResponse(get_metrics_text(), media_type="text/plain; charset=utf-8")


@app.post("/v1/parse/namespaces", response_model=list[NamespaceRow])
def parse_namespaces(body: ParseRequest):
    """Parse pasted namespace TSV (14 columns, header optional)."""
    return parse_namespace_rows(body.text)


@app.post("/v1/parse/nodes", response_model=list[NodeRow])
def parse_nodes(body: ParseRequest):
    """Parse pasted node TSV (10 columns, header optional)."""
    return parse_node_rows(body.text)


@app.post("/v1/instance-prices", response_model=list[InstancePrice])
def instance_prices(body: DeriveRequest):
    """Re-derive instance price buckets from nodes, keeping prices already entered for known keys."""
    return derive_instance_prices(body.nodes, body.existing_prices)


@app.get("/v1/catalog/providers")
def catalog_providers():
    """List providers with pricing catalogs."""
    return get_providers()


@app.get("/v1/catalog/regions")
def catalog_regions(cloud: str):
    """List regions for a provider."""
    try:
        return get_regions(cloud)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/v1/catalog/instances")
def catalog_instances(cloud: str, region: str | None = None):
    """List instance types for a provider; optional region resolves the monthly price."""
    try:
        return get_instance_types(cloud, region)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/v1/pricing")
def pricing(provider: str, types: str, regions: str | None = None):
    """
    Monthly on-demand prices: {"prices": {type: {region: monthly_usd}}}.
    Types/regions are comma-separated; missing entries are simply absent.
    """
    if provider not in PROVIDERS:
        raise HTTPException(status_code=400, detail=f"provider must be one of: {', '.join(PROVIDERS)}")
    type_list = _split_csv(types)
    if not type_list:
        raise HTTPException(status_code=400, detail="types must contain at least one instance type")
    try:
        prices = lookup_prices(provider, type_list, _split_csv(regions))
    except CatalogUnavailable as e:
        _LOG.error("Pricing lookup failed: %s", e)
        raise HTTPException(status_code=502, detail="Failed to read pricing data")
    return {"prices": prices}


@app.post("/v1/compute", response_model=ComputeResponse)
def compute_results(request: CalculatorRequest):
    """
    Compute the full sidecar vs ambient comparison. results is null when
    namespace or node rows are missing (not enough data yet).
    """
    results = compute(request.config, request.namespace_rows, request.node_rows, request.instance_prices)
    record_computation("results" if results is not None else "insufficient_data")
    return ComputeResponse(results=results)


def _report_pdf(request: CalculatorRequest) -> bytes | None:
    """Compute and render (sync, for timeout wrapper). None when there is not enough data."""
    results = compute(request.config, request.namespace_rows, request.node_rows, request.instance_prices)
    if results is None:
        return None
    return generate_report_pdf(request.config, results)


@app.post("/v1/report")
def report(request: CalculatorRequest, _: None = Depends(require_report_auth)):
    """Generate and return the PDF export. Requires an API key unless AMBICALC_DEMO=1."""
    try:
        pdf_bytes = run_sync_with_timeout(get_report_timeout_sec(), _report_pdf, request)
    except TimeoutError:
        raise HTTPException(status_code=504, detail="Report generation timed out.")
    if pdf_bytes is None:
        raise HTTPException(
            status_code=400,
            detail="Not enough data for a report. Import namespace and node rows first.",
        )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={report_filename(request.config)}"},
    )
