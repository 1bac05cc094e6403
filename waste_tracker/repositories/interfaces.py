"""Repository abstractions for the service layer."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from waste_tracker.models.report import Report


@dataclass(frozen=True)
class ReportRecord:
    """Read-only view of one report, as consumed by the analytics aggregator."""

    id: str
    title: str
    status: str
    created_at: datetime | None
    updated_at: datetime | None = None
    resolved_at: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
    location_details: dict[str, Any] | None = None
    reporter: str | None = None


class ReportRepository(Protocol):
    """Persistence boundary for the report collection."""

    async def add(self, report: Report) -> Report: ...

    async def list_all(self) -> list[Report]: ...

    async def get(self, report_id: uuid.UUID) -> Report | None: ...

    async def update_status(
        self, report_id: uuid.UUID, *, status: str, now: datetime
    ) -> Report | None: ...

    async def delete(self, report_id: uuid.UUID) -> bool: ...

    async def count_by_status(self) -> dict[str, int]: ...

    async def snapshot(self) -> list[ReportRecord]: ...
