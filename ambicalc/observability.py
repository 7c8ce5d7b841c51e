"""Structured request logging and in-process metrics."""
import logging
import time
import uuid
from collections import defaultdict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

_LOG = logging.getLogger(__name__)

# Counters for /v1/metrics, reset on restart
_request_total: dict[str, int] = defaultdict(int)
_request_duration_sec: list[float] = []
_computations: dict[str, int] = defaultdict(int)
_start_time = time.time()
_MAX_DURATION_SAMPLES = 1000


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Attach a request id and log one structured record per request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        path = request.url.path
        method = request.method
        start = time.time()
        response = await call_next(request)
        elapsed = time.time() - start
        _request_total[f"{method} {path}"] += 1
        _request_total["_total"] += 1
        _request_duration_sec.append(elapsed)
        if len(_request_duration_sec) > _MAX_DURATION_SAMPLES:
            _request_duration_sec[:] = _request_duration_sec[-_MAX_DURATION_SAMPLES:]
        _LOG.info(
            "request finished",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "status": response.status_code,
                "duration_ms": round(elapsed * 1000, 2),
            },
        )
        response.headers["X-Request-ID"] = request_id
        return response


def record_computation(outcome: str) -> None:
    """Count compute calls by outcome ("results" or "insufficient_data")."""
    _computations[outcome] += 1


def get_metrics_text() -> str:
    """Prometheus-style text for GET /v1/metrics."""
    uptime = time.time() - _start_time
    lines = [
        "# HELP ambicalc_uptime_seconds Process uptime in seconds.",
        "# TYPE ambicalc_uptime_seconds gauge",
        f"ambicalc_uptime_seconds {uptime:.2f}",
        "# HELP ambicalc_http_requests_total Total HTTP requests by method and path.",
        "# TYPE ambicalc_http_requests_total counter",
    ]
    for key, count in sorted(_request_total.items()):
        if key == "_total":
            lines.append(f'ambicalc_http_requests_total{{aggregate="all"}} {count}')
        else:
            method, _, path = key.partition(" ")
            path = path.replace('"', r"\"")
            lines.append(f'ambicalc_http_requests_total{{method="{method}",path="{path}"}} {count}')
    if _computations:
        lines.extend([
            "# HELP ambicalc_computations_total Cost model computations by outcome.",
            "# TYPE ambicalc_computations_total counter",
        ])
        for outcome, count in sorted(_computations.items()):
            lines.append(f'ambicalc_computations_total{{outcome="{outcome}"}} {count}')
    if _request_duration_sec:
        avg = sum(_request_duration_sec) / len(_request_duration_sec)
        lines.extend([
            "# HELP ambicalc_http_request_duration_seconds Recent request duration (avg).",
            "# TYPE ambicalc_http_request_duration_seconds gauge",
            f"ambicalc_http_request_duration_seconds {avg:.4f}",
        ])
    return "\n".join(lines) + "\n"
