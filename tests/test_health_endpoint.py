from fastapi.testclient import TestClient

from rootstock_mcp.metrics import GatewayMetrics
from rootstock_mcp.server import app


def test_health_endpoint():
    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json().get("status") == "ok"
    assert resp.headers.get("X-Request-ID")


def test_metrics_endpoint_counts_requests():
    client = TestClient(app)
    client.get("/health")
    resp = client.get("/metrics")
    assert resp.status_code == 200
    data = resp.json()
    # Two requests so far: /health and /metrics
    assert data.get("requests", 0) >= 2
    assert len(data["recent_request_durations_ms"]) >= 1


def test_gateway_metrics_tracks_errors_by_kind():
    metrics = GatewayMetrics()
    metrics.record_tool("erc20_transfer", success=True)
    metrics.record_transaction("erc20_transfer")
    metrics.record_tool("erc20_transfer", success=False, kind="InvalidAmount")
    metrics.record_tool("get_address", success=False, kind="NoAccount")
    metrics.record_tool("get_address", success=False)

    snapshot = metrics.snapshot()
    assert snapshot["tool_success"] == {"erc20_transfer": 1}
    assert snapshot["tool_error"] == {"erc20_transfer": 1, "get_address": 2}
    assert snapshot["error_kinds"] == {"InvalidAmount": 1, "NoAccount": 1, "Unknown": 1}
    assert snapshot["transactions_submitted"] == {"erc20_transfer": 1}

    metrics.reset()
    assert metrics.snapshot()["tool_error"] == {}


def test_request_durations_keep_only_recent_entries():
    metrics = GatewayMetrics(max_recent_requests=3)
    for index in range(10):
        metrics.record_duration(f"req-{index}", float(index))
    assert metrics.snapshot()["recent_request_durations_ms"] == {"req-7": 7.0, "req-8": 8.0, "req-9": 9.0}
