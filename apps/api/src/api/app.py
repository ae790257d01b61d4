from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from api.dependencies import get_database, get_settings
from api.errors import ApiError, to_api_error
from api.middleware import ObservabilityMiddleware
from api.observability import ApiMetrics, get_trace_id
from api.response import error_response, success_response
from api.routers.geo import router as geo_router
from api.routers.jobs import router as jobs_router
from api.routers.municipalities import router as municipalities_router
from api.routers.reports import router as reports_router
from api.routers.tasks import router as tasks_router
from api.routers.workers import router as workers_router
from api.telemetry import configure_telemetry
from waste_core.core.exceptions import RemoteOperationError, WasteCoreError

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Waste Watch API", version=API_VERSION)
    configure_telemetry(settings, version=API_VERSION)
    app.state.api_metrics = ApiMetrics()
    app.add_middleware(ObservabilityMiddleware, metrics=app.state.api_metrics, tracer_name=settings.SERVICE_NAME)
    app.include_router(reports_router)
    app.include_router(tasks_router)
    app.include_router(workers_router)
    app.include_router(municipalities_router)
    app.include_router(jobs_router)
    app.include_router(geo_router)

    @app.get("/healthz")
    async def healthz() -> dict:
        return success_response({"status": "ok"}, meta={})

    @app.get("/readyz")
    async def readyz() -> JSONResponse:
        database = get_database()
        if database is not None:
            try:
                await database.connect()
            except Exception:
                logger.warning("readiness_check_failed", extra={"component": "api"}, exc_info=True)
                return JSONResponse(status_code=503, content=error_response("NOT_READY", "database unavailable"))
        return JSONResponse(content=success_response({"status": "ready"}, meta={}))

    @app.get("/metrics")
    async def metrics() -> Response:
        payload = app.state.api_metrics.render()
        return Response(content=payload, media_type="text/plain; version=0.0.4")

    @app.exception_handler(ApiError)
    async def handle_api_error(_: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_response(exc.code, exc.message))

    @app.exception_handler(WasteCoreError)
    async def handle_domain_error(request: Request, exc: WasteCoreError) -> JSONResponse:
        api_error = to_api_error(exc)
        log = logger.error if isinstance(exc, RemoteOperationError) else logger.info
        log(
            "domain_error",
            extra={
                "component": "api",
                "code": api_error.code,
                "path": request.url.path,
                "trace_id": get_trace_id(),
                "detail": str(exc),
            },
        )
        return JSONResponse(status_code=api_error.status_code, content=error_response(api_error.code, api_error.message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        message = "; ".join(err["msg"] for err in exc.errors())
        return JSONResponse(
            status_code=422,
            content=error_response("VALIDATION_ERROR", message),
        )

    return app


app = create_app()
