from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from waste_tracker.models.report import Report
from waste_tracker.repositories.interfaces import ReportRecord

RESOLVED = "Resolved"


class SqlAlchemyReportRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, report: Report) -> Report:
        self._session.add(report)
        await self._session.flush()
        return report

    async def list_all(self) -> list[Report]:
        stmt = select(Report).order_by(Report.created_at.desc(), Report.id.desc())
        return list((await self._session.scalars(stmt)).all())

    async def get(self, report_id: uuid.UUID) -> Report | None:
        return await self._session.get(Report, report_id)

    async def update_status(
        self, report_id: uuid.UUID, *, status: str, now: datetime
    ) -> Report | None:
        r = await self._session.get(Report, report_id)
        if not r:
            return None
        if status == RESOLVED:
            # keep the first resolution stamp when the same status is re-applied
            if r.status != RESOLVED or r.resolved_at is None:
                r.resolved_at = now
        else:
            r.resolved_at = None
        r.status = status
        r.updated_at = now
        await self._session.flush()
        return r

    async def delete(self, report_id: uuid.UUID) -> bool:
        res = await self._session.execute(delete(Report).where(Report.id == report_id))
        return bool(res.rowcount)

    async def count_by_status(self) -> dict[str, int]:
        stmt = select(Report.status, func.count()).group_by(Report.status)
        rows = (await self._session.execute(stmt)).all()
        return {str(status): int(n) for status, n in rows}

    async def snapshot(self) -> list[ReportRecord]:
        rows = await self.list_all()
        return [
            ReportRecord(
                id=str(r.id),
                title=r.title,
                status=r.status,
                created_at=r.created_at,
                updated_at=r.updated_at,
                resolved_at=r.resolved_at,
                latitude=r.latitude,
                longitude=r.longitude,
                location_details=r.location_details,
                reporter=r.reporter,
            )
            for r in rows
        ]
