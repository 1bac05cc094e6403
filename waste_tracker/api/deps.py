"""Service providers for FastAPI dependency injection."""

from waste_tracker import db
from waste_tracker.core.config import settings
from waste_tracker.infra.unit_of_work import SqlAlchemyUnitOfWork
from waste_tracker.services.analytics import AnalyticsService
from waste_tracker.services.health import HealthService
from waste_tracker.services.reports import ReportService
from waste_tracker.services.uploads import UploadService
from waste_tracker.utils.datetime import resolve_timezone

__all__ = [
    "get_analytics_service",
    "get_health_service",
    "get_report_service",
    "get_upload_service",
]


def _uow_factory() -> SqlAlchemyUnitOfWork:
    # looked up per call so a reconfigured engine is picked up
    return SqlAlchemyUnitOfWork(db.SessionLocal)


def get_report_service() -> ReportService:
    return ReportService(_uow_factory)


def get_analytics_service() -> AnalyticsService:
    return AnalyticsService(_uow_factory, tz=resolve_timezone(settings.report_timezone))


def get_upload_service() -> UploadService:
    return UploadService(
        settings.upload_dir,
        url_prefix=settings.upload_url_prefix,
        max_bytes=settings.max_upload_bytes,
    )


def get_health_service() -> HealthService:
    return HealthService(db.SessionLocal)
