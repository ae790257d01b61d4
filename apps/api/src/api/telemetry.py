from __future__ import annotations

import logging

from devkit.config import ServiceSettings
from devkit.observability import configure_logging, configure_otel, configure_probe_access_log_filter

logger = logging.getLogger(__name__)


def configure_telemetry(settings: ServiceSettings, version: str) -> None:
    """Logging, tracing and probe filtering for the API process. Safe to call once per app factory."""
    configure_logging(settings.LOG_LEVEL, default_component="api")
    configure_otel(service_name=settings.SERVICE_NAME, service_version=version)
    configure_probe_access_log_filter()
    logger.debug("telemetry_configured", extra={"component": "api", "service": settings.SERVICE_NAME})
