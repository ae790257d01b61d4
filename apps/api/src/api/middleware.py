from __future__ import annotations

from time import perf_counter
from uuid import uuid4

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from api.observability import ApiMetrics, ApiRequestMetric, set_trace_id


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, metrics: ApiMetrics, tracer_name: str) -> None:
        super().__init__(app)
        self._metrics = metrics
        self._tracer = trace.get_tracer(tracer_name)

    async def dispatch(self, request: Request, call_next) -> Response:
        trace_id = request.headers.get("x-trace-id") or str(uuid4())
        set_trace_id(trace_id)
        started = perf_counter()
        with self._tracer.start_as_current_span("http.request") as span:
            span.set_attribute("http.method", request.method)
            span.set_attribute("trace.id", trace_id)
            try:
                response = await call_next(request)
            except Exception as exc:
                self._observe(request, 500, started, trace_id)
                span.set_attribute("http.status_code", 500)
                span.record_exception(exc)
                span.set_status(Status(StatusCode.ERROR))
                raise
            span.set_attribute("http.route", _route_template(request))
            span.set_attribute("http.status_code", response.status_code)

        response.headers["x-trace-id"] = trace_id
        self._observe(request, response.status_code, started, trace_id)
        return response

    def _observe(self, request: Request, status_code: int, started: float, trace_id: str) -> None:
        self._metrics.observe(
            ApiRequestMetric(
                method=request.method,
                route=_route_template(request),
                status_code=status_code,
                duration_ms=(perf_counter() - started) * 1000.0,
                trace_id=trace_id,
            )
        )
