"""Response models for GET /reports/analytics."""

from __future__ import annotations

from waste_tracker.schemas.common import CamelModel


class AnalyticsMetrics(CamelModel):
    total_reports: int
    resolution_rate: int
    avg_response_time: int
    active_areas: int


class ChartSlice(CamelModel):
    name: str
    value: int
    color: str


class TypeCount(CamelModel):
    type: str
    count: int
    color: str


class AreaCount(CamelModel):
    area: str
    count: int
    percentage: int


class AreaScore(CamelModel):
    name: str
    score: int


class AreaReports(CamelModel):
    name: str
    reports: int


class TimelinePoint(CamelModel):
    date: str
    display_date: str
    count: int


class ResolutionPoint(CamelModel):
    date: str
    display_date: str
    avg_time: int


class ResolutionTrend(CamelModel):
    current: int
    previous: int
    change: int
    direction: str


class ResolutionMetrics(CamelModel):
    average_resolution_time: int
    on_time_percentage: int
    delayed_percentage: int
    trend: ResolutionTrend
    weekly_data: list[ResolutionPoint]


class ReporterEntry(CamelModel):
    id: str
    name: str
    reports: int
    resolved: int
    points: int
    resolution_rate: int


class AnalyticsResponse(CamelModel):
    metrics: AnalyticsMetrics
    status_distribution: list[ChartSlice]
    reports_by_type: list[TypeCount]
    waste_category_data: list[ChartSlice]
    reports_by_area: list[AreaCount]
    cleanest_areas: list[AreaScore]
    most_reported_areas: list[AreaReports]
    timeline_data: list[TimelinePoint]
    resolution_metrics: ResolutionMetrics
    top_reporters: list[ReporterEntry]
