from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field

from waste_tracker.schemas.common import CamelModel


class ReportStatus(str, Enum):
    submitted = "Submitted"
    in_progress = "In Progress"
    resolved = "Resolved"


class ReportCreateRequest(CamelModel):
    # title/description are checked by the service so a missing field is a 400
    title: str | None = Field(default=None, description="Short title, also the issue type")
    description: str | None = Field(default=None, description="Free text description")
    gps: Any = Field(default=None, description='"lat, lng" string or {latitude, longitude}')
    location_details: dict[str, Any] | None = Field(
        default=None, description="Reverse-geocoded address breakdown"
    )
    photo_url: str | None = None
    reporter: str | None = None
    contact: str | None = None


class ReportStatusUpdateRequest(CamelModel):
    status: str | None = Field(default=None, description="Target status")


class GpsPoint(CamelModel):
    latitude: float
    longitude: float


class ReportItem(CamelModel):
    id: str
    title: str
    description: str
    status: str
    gps: GpsPoint | None = None
    location_details: dict[str, Any] | None = None
    photo_url: str | None = None
    reporter: str
    contact: str
    created_at: str | None = None
    updated_at: str | None = None
    resolved_at: str | None = None


class ReportCreatedResponse(CamelModel):
    success: bool
    id: str


class ReportStats(CamelModel):
    total_reports: int
    in_progress: int
    resolved: int
    success_rate: int
