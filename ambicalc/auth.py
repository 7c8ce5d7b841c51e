"""API key check for PDF export (POST /v1/report). Compute and parsing routes are open."""
import hmac
import os

from fastapi import Header, HTTPException, status


def get_required_api_key() -> str | None:
    """Configured export key (AMBICALC_API_KEY), or None when export keys are not set up."""
    return (os.environ.get("AMBICALC_API_KEY") or "").strip() or None


def _get_provided_key(x_api_key: str | None, authorization: str | None) -> str | None:
    if x_api_key:
        return x_api_key.strip()
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return None


def is_demo_enabled() -> bool:
    """AMBICALC_DEMO=1/true/yes lets anyone export reports. Always off when AMBICALC_ENV or NODE_ENV is production."""
    env = (os.environ.get("AMBICALC_ENV") or os.environ.get("NODE_ENV") or "").strip().lower()
    if env in ("production", "prod"):
        return False
    return (os.environ.get("AMBICALC_DEMO") or "").strip().lower() in ("1", "true", "yes")


def require_report_auth(
    x_api_key: str | None = Header(None, alias="X-API-Key"),
    authorization: str | None = Header(None),
) -> None:
    """Dependency for POST /v1/report: X-API-Key or Authorization: Bearer must match AMBICALC_API_KEY."""
    if is_demo_enabled():
        return
    required = get_required_api_key()
    if not required:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="PDF export is disabled: no export key is configured on this server. "
                   "Results are still available from POST /v1/compute.",
        )
    provided = _get_provided_key(x_api_key, authorization)
    if not provided or not hmac.compare_digest(provided.encode(), required.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="PDF export needs a valid export key in X-API-Key or Authorization: Bearer.",
            headers={"WWW-Authenticate": "Bearer"},
        )
