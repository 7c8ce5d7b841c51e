"""Pytest fixtures for calculator tests."""
import pytest

from ambicalc.models import CalculatorConfig, InstancePrice, NamespaceRow, NodeRow


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Each test starts outside production, without demo mode or an API key."""
    for name in ("AMBICALC_DEMO", "AMBICALC_API_KEY", "AMBICALC_ENV", "NODE_ENV", "AMBICALC_CATALOG_DIR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def namespace_rows():
    return [NamespaceRow(cluster="prod", namespace="payments", sidecar_req_cpu=10, sidecar_limit_cpu=20)]


@pytest.fixture
def node_rows():
    return [
        NodeRow(cluster="prod", name=f"node-{i}", type="m5.xlarge", region="us-east-1", cpus=4)
        for i in range(5)
    ]


@pytest.fixture
def instance_prices():
    return [InstancePrice(key="m5.xlarge|us-east-1", type="m5.xlarge", region="us-east-1", cpus=4, count=5, monthly_price=100)]


@pytest.fixture
def config():
    return CalculatorConfig(customer_name="Acme Corp", waypoint_replicas=3, ztunnel_tax=0.3, fleet_rps=0, discount_pct=0)
