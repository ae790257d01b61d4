from __future__ import annotations

from collections import deque
from contextvars import ContextVar
from dataclasses import asdict, dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

_trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")

LATENCY_BUCKETS_MS = (5, 10, 25, 50, 100, 250, 500, 1000, 3000)


def set_trace_id(trace_id: str) -> None:
    _trace_id_ctx.set(trace_id)


def get_trace_id() -> str:
    return _trace_id_ctx.get()


@dataclass(frozen=True)
class ApiRequestMetric:
    method: str
    route: str
    status_code: int
    duration_ms: float
    trace_id: str


class ApiMetrics:
    """Per-app request metrics.

    Prometheus series are labelled by route template (``/v1/reports/{report_id}``)
    so report and task ids never become label values. The most recent
    observations are also kept in memory for inspection.
    """

    def __init__(self, recent_limit: int = 500) -> None:
        self._recent: deque[ApiRequestMetric] = deque(maxlen=recent_limit)
        self._registry = CollectorRegistry()
        self._requests = Counter(
            "waste_api_http_requests_total",
            "Total waste API HTTP requests",
            labelnames=("method", "route", "status_code"),
            registry=self._registry,
        )
        self._latency = Histogram(
            "waste_api_http_request_duration_ms",
            "Waste API HTTP request latency in milliseconds",
            labelnames=("method", "route"),
            buckets=LATENCY_BUCKETS_MS,
            registry=self._registry,
        )

    def observe(self, metric: ApiRequestMetric) -> None:
        self._recent.append(metric)
        self._requests.labels(metric.method, metric.route, str(metric.status_code)).inc()
        self._latency.labels(metric.method, metric.route).observe(metric.duration_ms)

    def recent(self, route: str | None = None) -> list[dict]:
        return [asdict(item) for item in self._recent if route is None or item.route == route]

    def render(self) -> str:
        return generate_latest(self._registry).decode("utf-8")
