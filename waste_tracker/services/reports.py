from __future__ import annotations

import logging
import math
import re
import uuid
from collections.abc import Callable, Mapping
from typing import Any

from waste_tracker.core.exceptions import NotFoundError, ValidationError
from waste_tracker.infra.unit_of_work import UnitOfWork
from waste_tracker.models.report import Report
from waste_tracker.schemas.common import MessageResponse
from waste_tracker.schemas.report import (
    GpsPoint,
    ReportCreatedResponse,
    ReportCreateRequest,
    ReportItem,
    ReportStats,
    ReportStatus,
)
from waste_tracker.utils.datetime import to_iso, utcnow
from waste_tracker.utils.numbers import percentage

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], UnitOfWork]

DEFAULT_REPORTER = "Anonymous"
DEFAULT_CONTACT = "Not provided"
_STATUS_VALUES = frozenset(s.value for s in ReportStatus)


# leading decimal number; trailing text such as " N" or "deg" is ignored
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _to_float(value: Any) -> float | None:
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value.strip())
        if match is None:
            return None
        value = match.group()
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def parse_gps(value: Any) -> GpsPoint | None:
    """Normalize a "lat, lng" string or a {latitude, longitude} mapping.

    Anything unparseable yields None rather than an error.
    """
    if not value:
        return None
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",")]
        if len(parts) != 2:
            return None
        lat, lng = _to_float(parts[0]), _to_float(parts[1])
    elif isinstance(value, Mapping):
        raw_lat, raw_lng = value.get("latitude"), value.get("longitude")
        # zero is treated as "not provided" for the mapping form
        if not raw_lat or not raw_lng:
            return None
        lat, lng = _to_float(raw_lat), _to_float(raw_lng)
    else:
        return None
    if lat is None or lng is None:
        return None
    return GpsPoint(latitude=lat, longitude=lng)


def parse_report_id(report_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(report_id))
    except ValueError:
        raise ValidationError("Invalid report ID format") from None


def to_item(r: Report) -> ReportItem:
    gps = None
    if r.latitude is not None and r.longitude is not None:
        gps = GpsPoint(latitude=r.latitude, longitude=r.longitude)
    return ReportItem(
        id=str(r.id),
        title=r.title,
        description=r.description,
        status=r.status,
        gps=gps,
        location_details=r.location_details,
        photo_url=r.photo_url,
        reporter=r.reporter,
        contact=r.contact,
        created_at=to_iso(r.created_at),
        updated_at=to_iso(r.updated_at),
        resolved_at=to_iso(r.resolved_at),
    )


class ReportService:
    """Ingestion, lookup and status transitions for reports."""

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    async def create(self, payload: ReportCreateRequest) -> ReportCreatedResponse:
        title = (payload.title or "").strip()
        description = (payload.description or "").strip()
        if not title or not description:
            raise ValidationError("Title and description are required")

        gps = parse_gps(payload.gps)
        report = Report(
            id=uuid.uuid4(),
            title=payload.title,
            description=payload.description,
            status=ReportStatus.submitted.value,
            latitude=gps.latitude if gps else None,
            longitude=gps.longitude if gps else None,
            location_details=payload.location_details or None,
            photo_url=payload.photo_url or None,
            reporter=payload.reporter or DEFAULT_REPORTER,
            contact=payload.contact or DEFAULT_CONTACT,
            created_at=utcnow(),
        )
        async with self._uow_factory() as uow:
            await uow.reports.add(report)
        logger.info("report_created", extra={"report_id": str(report.id), "has_gps": gps is not None})
        return ReportCreatedResponse(success=True, id=str(report.id))

    async def list(self) -> list[ReportItem]:
        async with self._uow_factory() as uow:
            rows = await uow.reports.list_all()
            return [to_item(r) for r in rows]

    async def get(self, report_id: str) -> ReportItem:
        rid = parse_report_id(report_id)
        async with self._uow_factory() as uow:
            r = await uow.reports.get(rid)
            if r is None:
                raise NotFoundError("Report not found")
            return to_item(r)

    async def update_status(self, report_id: str, status: str | None) -> MessageResponse:
        rid = parse_report_id(report_id)
        if not status:
            raise ValidationError("Status is required")
        if status not in _STATUS_VALUES:
            raise ValidationError("Invalid status")
        async with self._uow_factory() as uow:
            r = await uow.reports.update_status(rid, status=status, now=utcnow())
            if r is None:
                raise NotFoundError("Report not found")
        logger.info("report_status_updated", extra={"report_id": str(rid), "status": status})
        return MessageResponse(success=True, message="Report status updated successfully")

    async def delete(self, report_id: str) -> MessageResponse:
        rid = parse_report_id(report_id)
        async with self._uow_factory() as uow:
            deleted = await uow.reports.delete(rid)
            if not deleted:
                raise NotFoundError("Report not found")
        logger.info("report_deleted", extra={"report_id": str(rid)})
        return MessageResponse(success=True, message="Report deleted successfully")

    async def stats(self) -> ReportStats:
        async with self._uow_factory() as uow:
            counts = await uow.reports.count_by_status()
        total = sum(counts.values())
        resolved = counts.get(ReportStatus.resolved.value, 0)
        return ReportStats(
            total_reports=total,
            in_progress=counts.get(ReportStatus.in_progress.value, 0),
            resolved=resolved,
            success_rate=percentage(resolved, total),
        )
