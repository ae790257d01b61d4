"""Common runtime devkit for service infrastructure concerns."""

from devkit.config import ServiceSettings, load_settings
from devkit.db import (
    AsyncDatabaseManager,
    create_all_tables,
    create_async_engine,
    is_transient_db_error,
    normalize_database_url,
)
from devkit.observability import (
    ComponentDefaultFilter,
    configure_logging,
    configure_otel,
    configure_probe_access_log_filter,
)
from devkit.timezone import now_utc, now_utc_iso, parse_timestamp

__all__ = [
    "AsyncDatabaseManager",
    "ComponentDefaultFilter",
    "ServiceSettings",
    "configure_logging",
    "configure_otel",
    "configure_probe_access_log_filter",
    "create_all_tables",
    "create_async_engine",
    "is_transient_db_error",
    "load_settings",
    "normalize_database_url",
    "now_utc",
    "now_utc_iso",
    "parse_timestamp",
]
