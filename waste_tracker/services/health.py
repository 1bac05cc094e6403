from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


class HealthService:
    """Database reachability check behind /readyz."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def ok(self) -> dict:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
        return {"ok": True}
