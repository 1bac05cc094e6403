# tests/conftest.py
import os
import tempfile
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient

# Configure the environment before the app reads its settings
load_dotenv(".env.test", override=False)
os.environ["TESTING"] = "1"
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(tempfile.gettempdir()) / 'waste_tracker_import.db'}",
)

from waste_tracker import db  # noqa: E402
from waste_tracker.api.deps import get_upload_service  # noqa: E402
from waste_tracker.core.startup import run_database_migrations  # noqa: E402
from waste_tracker.main import create_app  # noqa: E402
from waste_tracker.middleware.rate_limit import reset_limits  # noqa: E402
from waste_tracker.models import Base, Report  # noqa: E402
from waste_tracker.services.uploads import UploadService  # noqa: E402

AddReport = Callable[..., Awaitable[str]]


@pytest_asyncio.fixture
async def engine(tmp_path):
    # Each test gets a fresh schema; TEST_DATABASE_URL points at Postgres if wanted
    url = os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    db.configure_engine(url)
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield db.engine
    finally:
        await db.engine.dispose()


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def app(engine, upload_dir):
    run_database_migrations()  # marks migrations done under TESTING
    reset_limits()
    application = create_app()
    application.dependency_overrides[get_upload_service] = lambda: UploadService(
        upload_dir, url_prefix="/uploads", max_bytes=5 * 1024 * 1024
    )
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def app_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def add_report(engine) -> AddReport:
    """Insert a report row directly, with full control over timestamps."""

    async def _add(
        title: str = "Overflowing bin",
        *,
        status: str = "Submitted",
        created_at: datetime | None = None,
        resolved_at: datetime | None = None,
        **fields,
    ) -> str:
        created = (created_at or datetime.now(UTC)).astimezone(UTC)
        report = Report(
            title=title,
            description=fields.pop("description", "details"),
            status=status,
            reporter=fields.pop("reporter", "Anonymous"),
            contact=fields.pop("contact", "Not provided"),
            created_at=created,
            resolved_at=resolved_at.astimezone(UTC) if resolved_at else None,
            **fields,
        )
        async with db.SessionLocal() as session:
            session.add(report)
            await session.commit()
            return str(report.id)

    return _add
