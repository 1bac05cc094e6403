"""Replace the reports table with a small sample data set for the dashboards.

Usage: DATABASE_URL=... python -m scripts.seed_sample_reports
"""

from __future__ import annotations

import os
import uuid
from datetime import UTC, datetime, timedelta

from dotenv import load_dotenv
from sqlalchemy import create_engine, delete, insert

from waste_tracker.models.report import Report

# (title, description, status, days ago, (lat, lng))
_SAMPLES: tuple[tuple[str, str, str, int, tuple[float, float]], ...] = (
    (
        "Overflowing bin on Main Street",
        "The garbage bin is completely full and trash is spilling out",
        "Submitted",
        2,
        (40.7128, -74.0060),
    ),
    (
        "Illegal dumping in park",
        "Someone dumped construction debris in the park",
        "In Progress",
        1,
        (40.7589, -73.9851),
    ),
    (
        "Recycling bin request",
        "Need a new recycling bin for apartment building",
        "Resolved",
        5,
        (40.7505, -73.9934),
    ),
    (
        "Broken equipment at waste facility",
        "The compactor is not working properly",
        "Resolved",
        3,
        (40.7648, -73.9808),
    ),
    (
        "Overflowing bin in residential area",
        "Multiple bins are overflowing in the neighborhood",
        "Submitted",
        1,
        (40.7829, -73.9654),
    ),
    (
        "Illegal dumping near river",
        "Large amount of waste dumped near the river",
        "In Progress",
        4,
        (40.7614, -73.9776),
    ),
    (
        "Recycling program expansion request",
        "Request to expand recycling program to more areas",
        "Resolved",
        7,
        (40.7505, -73.9934),
    ),
    (
        "Broken trash compactor",
        "The industrial trash compactor needs repair",
        "Submitted",
        2,
        (40.7648, -73.9808),
    ),
)


def build_sample_reports(now: datetime) -> list[dict]:
    rows: list[dict] = []
    for title, description, status, days_ago, (lat, lng) in _SAMPLES:
        rows.append(
            {
                "id": uuid.uuid4(),
                "title": title,
                "description": description,
                "status": status,
                "latitude": lat,
                "longitude": lng,
                "reporter": "Anonymous",
                "contact": "Not provided",
                "created_at": now - timedelta(days=days_ago),
            }
        )
    return rows


def _database_url() -> str:
    url = os.environ["DATABASE_URL"]
    return url.replace("+asyncpg", "+psycopg").replace("+aiosqlite", "")


def main() -> None:
    load_dotenv()
    engine = create_engine(_database_url(), pool_pre_ping=True)
    rows = build_sample_reports(datetime.now(UTC))
    with engine.begin() as conn:
        conn.execute(delete(Report))
        conn.execute(insert(Report), rows)
    print(f"seed_sample_reports: inserted {len(rows)} reports")


if __name__ == "__main__":
    main()
