"""Transaction boundary for report operations.

A unit of work owns one session: the block commits when it exits cleanly
and rolls back when it raises, so a failed write never leaves a partial
report behind.
"""

from __future__ import annotations

from typing import Protocol

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from waste_tracker.repositories.interfaces import ReportRepository
from waste_tracker.repositories.report_repository import SqlAlchemyReportRepository

logger = structlog.get_logger(__name__)


class UnitOfWork(Protocol):
    reports: ReportRepository

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...


class SqlAlchemyUnitOfWork:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self.reports: ReportRepository

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self._session_factory()
        self.reports = SqlAlchemyReportRepository(self._session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        session, self._session = self._session, None
        if session is None:
            return
        try:
            if exc_type is None:
                await session.commit()
            else:
                await session.rollback()
                logger.debug("unit_of_work_rolled_back", error=exc_type.__name__)
        finally:
            await session.close()
