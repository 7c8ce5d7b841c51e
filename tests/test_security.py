"""Tests for rate limiting, report auth and the production demo guard."""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ambicalc.security import FixedWindowLimiter, RateLimitMiddleware, check_demo_in_production


def test_limiter_blocks_over_limit_then_resets():
    limiter = FixedWindowLimiter(limit=2, window_sec=60)
    assert limiter.hit("10.0.0.1", now=0)
    assert limiter.hit("10.0.0.1", now=1)
    assert not limiter.hit("10.0.0.1", now=2)
    # Other clients have their own window
    assert limiter.hit("10.0.0.2", now=2)
    # Next window
    assert limiter.hit("10.0.0.1", now=60)


def test_limiter_drops_expired_windows():
    limiter = FixedWindowLimiter(limit=5, window_sec=60)
    for i in range(100):
        limiter.hit(f"10.0.0.{i}", now=0)
    assert len(limiter) == 100
    limiter.hit("10.0.1.1", now=61)
    assert len(limiter) == 1


def test_limiter_sweep():
    limiter = FixedWindowLimiter(limit=5, window_sec=60)
    limiter.hit("a", now=0)
    limiter.hit("b", now=30)
    limiter.sweep(now=70)
    assert len(limiter) == 1


@pytest.fixture
def limited_client():
    app = FastAPI()
    app.add_middleware(
        RateLimitMiddleware,
        api_limiter=FixedWindowLimiter(limit=2, window_sec=60),
        report_limiter=FixedWindowLimiter(limit=1, window_sec=60),
    )

    @app.get("/v1/health")
    def health():
        return {"status": "ok"}

    @app.post("/v1/compute")
    def compute():
        return {"results": None}

    @app.post("/v1/report")
    def report():
        return {"ok": True}

    return TestClient(app)


def test_rate_limit_scopes(limited_client):
    assert limited_client.post("/v1/report").status_code == 200
    r = limited_client.post("/v1/report")
    assert r.status_code == 429
    assert "report" in r.json()["detail"]
    # Report budget is separate from the general API budget
    assert limited_client.post("/v1/compute").status_code == 200
    assert limited_client.post("/v1/compute").status_code == 200
    r = limited_client.post("/v1/compute")
    assert r.status_code == 429
    assert r.headers["Retry-After"] == "60"


def test_health_is_never_limited(limited_client):
    for _ in range(5):
        assert limited_client.get("/v1/health").status_code == 200


def test_demo_in_production_guard(monkeypatch, caplog):
    monkeypatch.setenv("AMBICALC_DEMO", "1")
    monkeypatch.setenv("AMBICALC_ENV", "production")
    check_demo_in_production()
    assert "AMBICALC_DEMO=1 is set in production" in caplog.text
    monkeypatch.setenv("AMBICALC_DEMO_FAIL_IN_PROD", "1")
    with pytest.raises(RuntimeError):
        check_demo_in_production()


def test_demo_outside_production_is_quiet(monkeypatch, caplog):
    monkeypatch.setenv("AMBICALC_DEMO", "1")
    monkeypatch.setenv("AMBICALC_DEMO_FAIL_IN_PROD", "1")
    check_demo_in_production()
    assert caplog.text == ""
