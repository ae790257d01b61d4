from __future__ import annotations

from datetime import timedelta

from devkit.config import ServiceSettings, load_settings
from devkit.db import AsyncDatabaseManager

from api.clients.geocoding_client import NominatimGeocodingClient
from api.services.geo_service import GeoService
from api.services.job_service import JobService
from api.services.municipality_service import MunicipalityService
from api.services.report_service import ReportService
from api.services.task_service import TaskService
from api.services.worker_service import WorkerService
from waste_core.matching import KeywordAddressMatcher
from waste_core.storage import InMemoryObjectStorage
from waste_core.store import InMemoryTableGateway, PublishingTableGateway, TableGateway
from waste_core.store.sql_gateway import SqlTableGateway
from waste_core.sync import InMemoryChangeFeed

_settings = load_settings("waste-watch-api")

if _settings.DATABASE_URL:
    _database: AsyncDatabaseManager | None = AsyncDatabaseManager(_settings.DATABASE_URL)
    _base_gateway: TableGateway = SqlTableGateway(_database)
else:
    _database = None
    _base_gateway = InMemoryTableGateway()

_change_feed = InMemoryChangeFeed()
_gateway = PublishingTableGateway(_base_gateway, _change_feed)
_storage = InMemoryObjectStorage(_settings.STORAGE_PUBLIC_BASE_URL)
_geocoder = NominatimGeocodingClient(
    base_url=_settings.GEOCODER_BASE_URL,
    timeout_seconds=_settings.GEOCODER_TIMEOUT_SECONDS,
)
_freshness_window = timedelta(seconds=_settings.WORKER_FRESHNESS_SECONDS)

_report_service = ReportService(
    _gateway,
    _storage,
    enforce_transitions=_settings.ENFORCE_STATUS_TRANSITIONS,
    max_photo_count=_settings.MAX_PHOTO_COUNT,
    max_photo_bytes=_settings.MAX_PHOTO_BYTES,
)
_task_service = TaskService(
    _gateway,
    _storage,
    enforce_transitions=_settings.ENFORCE_STATUS_TRANSITIONS,
    max_photo_count=_settings.MAX_PHOTO_COUNT,
    max_photo_bytes=_settings.MAX_PHOTO_BYTES,
)
_worker_service = WorkerService(
    _gateway,
    _task_service,
    _geocoder,
    freshness_window=_freshness_window,
    geolocation_timeout_seconds=_settings.GEOLOCATION_TIMEOUT_SECONDS,
)
_municipality_service = MunicipalityService(_gateway, KeywordAddressMatcher(), freshness_window=_freshness_window)
_job_service = JobService(_gateway, _storage)
_geo_service = GeoService(_geocoder)


def get_settings() -> ServiceSettings:
    return _settings


def get_database() -> AsyncDatabaseManager | None:
    return _database


def get_report_service() -> ReportService:
    return _report_service


def get_task_service() -> TaskService:
    return _task_service


def get_worker_service() -> WorkerService:
    return _worker_service


def get_municipality_service() -> MunicipalityService:
    return _municipality_service


def get_job_service() -> JobService:
    return _job_service


def get_geo_service() -> GeoService:
    return _geo_service
