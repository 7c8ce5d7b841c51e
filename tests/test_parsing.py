"""Tests for tab-separated inventory import."""
from ambicalc.parsing import is_header_row, parse_namespace_rows, parse_node_rows, parse_num

NS_HEADER = "Cluster\tNamespace\tServices\tPods\tContainers\tReqCores\tReqMem\tLimitCores\tLimitMem\tSidecarProxies\tSidecarReqCPU\tSidecarReqMem\tSidecarLimitCPU\tSidecarLimitMem"
NODE_HEADER = "Cluster\tName\tType\tRegion\tZone\tCPUs\tMemory(GB)\tK8sVersion\tOS\tArch"


def test_parse_num():
    assert parse_num("4") == 4
    assert parse_num(" 2.5 ") == 2.5
    assert parse_num("4 vCPU") == 4
    assert parse_num("1e3") == 1000
    assert parse_num("") == 0
    assert parse_num(None) == 0
    assert parse_num("abc") == 0
    assert parse_num("1e999") == 0  # overflows to inf
    assert parse_num("1e308") == 0
    assert parse_num("-2e9") == 0
    assert parse_num("1e9") == 1e9


def test_is_header_row():
    assert is_header_row(NS_HEADER)
    assert is_header_row(NODE_HEADER)
    assert is_header_row("CLUSTER\tNAME")
    assert not is_header_row("prod\tpayments\t3")


def test_parse_namespaces_with_header():
    text = NS_HEADER + "\nprod\tpayments\t3\t12\t24\t6\t12\t12\t24\t12\t1.2\t0.8\t2.4\t1.6\n"
    rows = parse_namespace_rows(text)
    assert len(rows) == 1
    r = rows[0]
    assert r.cluster == "prod"
    assert r.namespace == "payments"
    assert r.services == 3
    assert r.pods == 12
    assert r.sidecar_proxies == 12
    assert r.sidecar_req_cpu == 1.2
    assert r.sidecar_limit_mem == 1.6


def test_parse_namespaces_without_header_and_blank_lines():
    text = "\n\nprod\ta\t1\t2\n\n  \nprod\tb\t3\t4\n"
    rows = parse_namespace_rows(text)
    assert [r.namespace for r in rows] == ["a", "b"]
    # Missing trailing cells default to 0
    assert rows[0].sidecar_req_cpu == 0
    assert rows[1].pods == 4


def test_parse_namespaces_keeps_duplicates_and_order():
    text = "prod\tweb\t1\t1\nprod\tweb\t1\t1\nstage\tapi\t1\t1"
    rows = parse_namespace_rows(text)
    assert [(r.cluster, r.namespace) for r in rows] == [("prod", "web"), ("prod", "web"), ("stage", "api")]


def test_parse_namespaces_non_numeric_cells():
    rows = parse_namespace_rows("prod\tweb\tn/a\tNaN\t-\tInfinity")
    assert rows[0].services == 0
    assert rows[0].pods == 0
    assert rows[0].containers == 0
    assert rows[0].req_cores == 0


def test_parse_nodes():
    text = NODE_HEADER + "\nprod\tip-10-0-0-1\tm5.xlarge\tus-east-1\tus-east-1a\t4\t16\tv1.29.3\tlinux\tamd64"
    rows = parse_node_rows(text)
    assert len(rows) == 1
    n = rows[0]
    assert n.type == "m5.xlarge"
    assert n.region == "us-east-1"
    assert n.zone == "us-east-1a"
    assert n.cpus == 4
    assert n.memory == 16
    assert n.k8s_version == "v1.29.3"
    assert n.arch == "amd64"


def test_parse_nodes_trims_cells():
    rows = parse_node_rows("prod\t node-1 \t m5.large \tus-west-2\t\t2")
    assert rows[0].name == "node-1"
    assert rows[0].type == "m5.large"
    assert rows[0].zone == ""
    assert rows[0].os == ""


def test_parse_empty_text():
    assert parse_namespace_rows("") == []
    assert parse_node_rows("   \n\n") == []
    assert parse_node_rows(NODE_HEADER) == []
