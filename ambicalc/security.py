"""Rate limiting and production guards."""
import logging
import os
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

_RATE_LIMIT_REQUESTS = int(os.environ.get("AMBICALC_RATE_LIMIT_REQUESTS", "600"))
_RATE_LIMIT_WINDOW_SEC = int(os.environ.get("AMBICALC_RATE_LIMIT_WINDOW_SEC", "60"))
# Separate per-IP budget for POST /v1/report
_REPORT_RATE_LIMIT_REQUESTS = int(os.environ.get("AMBICALC_REPORT_RATE_LIMIT_REQUESTS", "20"))

# Probes and scrapes are never limited
_UNLIMITED_PATHS = frozenset({"/v1/health", "/v1/metrics"})
_REPORT_PATH = "/v1/report"


class FixedWindowLimiter:
    """
    Per-key request counter over fixed windows.
    Expired windows are dropped when their key is next seen and swept once per window,
    so memory tracks the clients active in the last window only.
    """

    def __init__(self, limit: int, window_sec: float):
        self.limit = limit
        self.window_sec = window_sec
        self._windows: dict[str, tuple[int, float]] = {}
        self._last_sweep = 0.0

    def __len__(self) -> int:
        return len(self._windows)

    def hit(self, key: str, now: float | None = None) -> bool:
        """Count one request for key. False when the key is over its limit in the current window."""
        now = time.time() if now is None else now
        if now - self._last_sweep >= self.window_sec:
            self.sweep(now)
        count, start = self._windows.get(key, (0, now))
        if now - start >= self.window_sec:
            count, start = 0, now
        if count >= self.limit:
            return False
        self._windows[key] = (count + 1, start)
        return True

    def sweep(self, now: float) -> None:
        expired = [k for k, (_, start) in self._windows.items() if now - start >= self.window_sec]
        for k in expired:
            del self._windows[k]
        self._last_sweep = now


def _client_ip(request: Request) -> str:
    client = request.scope.get("client")
    if client:
        return client[0]
    return request.headers.get("x-forwarded-for", "").split(",")[0].strip() or "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory per-IP limits on /v1/ routes. POST /v1/report draws from a separate
    report budget; health and metrics are exempt.
    """

    def __init__(self, app, api_limiter: FixedWindowLimiter | None = None, report_limiter: FixedWindowLimiter | None = None):
        super().__init__(app)
        self.api_limiter = api_limiter or FixedWindowLimiter(_RATE_LIMIT_REQUESTS, _RATE_LIMIT_WINDOW_SEC)
        self.report_limiter = report_limiter or FixedWindowLimiter(_REPORT_RATE_LIMIT_REQUESTS, _RATE_LIMIT_WINDOW_SEC)

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if path in _UNLIMITED_PATHS or not path.startswith("/v1/"):
            return await call_next(request)
        limiter = self.report_limiter if path == _REPORT_PATH else self.api_limiter
        if not limiter.hit(_client_ip(request)):
            logger.warning("Rate limit exceeded", extra={"path": path, "client": _client_ip(request)})
            detail = (
                "Too many report exports. Try again later."
                if limiter is self.report_limiter
                else "Too many requests. Try again later."
            )
            return JSONResponse(
                status_code=429,
                content={"detail": detail},
                headers={"Retry-After": str(int(limiter.window_sec))},
            )
        return await call_next(request)


def check_demo_in_production() -> None:
    """Log critical and optionally fail if AMBICALC_DEMO is set in production (where it is ignored)."""
    if (os.environ.get("AMBICALC_DEMO") or "").strip().lower() not in ("1", "true", "yes"):
        return
    env = (os.environ.get("AMBICALC_ENV") or os.environ.get("NODE_ENV") or "").lower()
    if env in ("production", "prod"):
        logger.critical(
            "AMBICALC_DEMO=1 is set in production; report export still requires AMBICALC_API_KEY. "
            "Unset AMBICALC_DEMO for production deployments."
        )
        if os.environ.get("AMBICALC_DEMO_FAIL_IN_PROD", "").strip() == "1":
            raise RuntimeError("AMBICALC_DEMO=1 must not be set in production. Unset AMBICALC_DEMO.")
