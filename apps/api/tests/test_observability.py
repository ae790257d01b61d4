from fastapi.testclient import TestClient

from api.app import create_app
from api.observability import ApiMetrics, ApiRequestMetric


def test_trace_header_is_echoed_back() -> None:
    client = TestClient(create_app())

    response = client.get("/healthz", headers={"x-trace-id": "trace-abc"})

    assert response.status_code == 200
    assert response.headers["x-trace-id"] == "trace-abc"


def test_trace_header_is_generated_when_missing() -> None:
    client = TestClient(create_app())

    response = client.get("/healthz")

    assert response.headers["x-trace-id"]


def test_request_latency_is_recorded() -> None:
    app = create_app()
    client = TestClient(app)

    response = client.get("/healthz")
    recent = app.state.api_metrics.recent()

    assert response.status_code == 200
    assert recent[-1]["route"] == "/healthz"
    assert recent[-1]["status_code"] == 200
    assert recent[-1]["duration_ms"] >= 0


def test_report_ids_are_collapsed_into_the_route_template() -> None:
    app = create_app()
    client = TestClient(app)

    client.get("/v1/reports/report-123")
    client.get("/v1/reports/report-456")
    recent = app.state.api_metrics.recent(route="/v1/reports/{report_id}")

    assert len(recent) == 2
    assert {item["status_code"] for item in recent} == {401}


def test_recent_buffer_is_bounded() -> None:
    metrics = ApiMetrics(recent_limit=2)
    for index in range(3):
        metrics.observe(ApiRequestMetric("GET", "/v1/tasks", 200, float(index), f"t-{index}"))

    assert [item["trace_id"] for item in metrics.recent()] == ["t-1", "t-2"]


def test_prometheus_endpoint_exposes_request_series() -> None:
    client = TestClient(create_app())

    client.get("/healthz")
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "waste_api_http_requests_total" in response.text
    assert "waste_api_http_request_duration_ms" in response.text
    assert 'route="/healthz"' in response.text
