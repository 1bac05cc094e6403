# waste_tracker/utils/datetime.py
from __future__ import annotations

import os
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

LOCALTIME_PATH = "/etc/localtime"


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(dt: datetime | None) -> datetime | None:
    """Return an aware UTC datetime; naive values read back from the store are UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_iso(dt: datetime | None) -> str | None:
    dt = as_utc(dt)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z") if dt else None


def _zone_from_env() -> tzinfo | None:
    name = os.environ.get("TZ", "").lstrip(":")
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        # POSIX rule strings such as "EST5EDT,M3.2.0,M11.1.0" are not IANA keys
        return None


def local_timezone(localtime_path: str = LOCALTIME_PATH) -> tzinfo:
    """The server's zone with its DST rules: `TZ`, then /etc/localtime, else UTC."""
    zone = _zone_from_env()
    if zone is not None:
        return zone
    try:
        with open(localtime_path, "rb") as fh:
            return ZoneInfo.from_file(fh, key="localtime")
    except (OSError, ValueError):
        return UTC


def resolve_timezone(name: str | None) -> tzinfo:
    """IANA zone by name, or the server's local zone when unset."""
    if name:
        return ZoneInfo(name)
    return local_timezone()
