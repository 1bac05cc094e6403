"""Analytics over the full report collection.

Every figure is derived from one snapshot read per request; nothing is
cached between requests. ``build_analytics`` is pure so it can be driven
with a fixed clock and zone.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, timedelta, tzinfo

import structlog

from waste_tracker.infra.unit_of_work import UnitOfWork
from waste_tracker.repositories.interfaces import ReportRecord
from waste_tracker.schemas.analytics import (
    AnalyticsMetrics,
    AnalyticsResponse,
    AreaCount,
    AreaReports,
    AreaScore,
    ChartSlice,
    ReporterEntry,
    ResolutionMetrics,
    ResolutionPoint,
    ResolutionTrend,
    TimelinePoint,
    TypeCount,
)
from waste_tracker.schemas.report import ReportStatus
from waste_tracker.services.areas import resolve_area
from waste_tracker.utils.datetime import as_utc, utcnow
from waste_tracker.utils.numbers import mean_rounded, percentage

UnitOfWorkFactory = Callable[[], UnitOfWork]

RESOLVED = ReportStatus.resolved.value
ANONYMOUS = "Anonymous"
OTHER = "Other"

STATUS_COLORS: tuple[tuple[str, str], ...] = (
    (ReportStatus.submitted.value, "#fbbf24"),
    (ReportStatus.in_progress.value, "#3b82f6"),
    (ReportStatus.resolved.value, "#10b981"),
)

# first matching rule wins
TYPE_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Overflowing Bin", ("overflow", "bin", "full")),
    ("Illegal Dumping", ("illegal", "dump", "litter")),
    ("Recycling Request", ("recycle", "recycling")),
    ("Broken Equipment", ("broken", "equipment", "damage")),
)
TYPE_COLORS = ("bg-yellow-500", "bg-red-500", "bg-green-500", "bg-blue-500", "bg-purple-500")

CATEGORY_COLORS: dict[str, str] = {
    "Overflowing Bin": "#ef4444",
    "Illegal Dumping": "#f97316",
    "Recycling Request": "#10b981",
    "Broken Equipment": "#3b82f6",
    OTHER: "#6b7280",
}

TIMELINE_DAYS = 30
WEEKLY_DAYS = 7
ON_TIME_DAYS = 7
TREND_WINDOW = timedelta(days=7)
TOP_REPORTERS = 5
TOP_AREAS = 3

logger = structlog.get_logger(__name__)


def classify_type(title: str) -> str:
    lowered = title.lower()
    for label, keywords in TYPE_RULES:
        if any(k in lowered for k in keywords):
            return label
    return OTHER


def resolution_timestamp(record: ReportRecord) -> datetime | None:
    """resolvedAt, falling back to updatedAt, then createdAt."""
    return as_utc(record.resolved_at or record.updated_at or record.created_at)


def resolution_days(record: ReportRecord) -> int:
    created = as_utc(record.created_at)
    resolved = resolution_timestamp(record)
    if created is None or resolved is None:
        return 0
    return max(0, (resolved - created) // timedelta(days=1))


def _day_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def _local_days(today: date, count: int) -> list[date]:
    start = today - timedelta(days=count - 1)
    return [start + timedelta(days=i) for i in range(count)]


def status_distribution(records: Sequence[ReportRecord]) -> list[ChartSlice]:
    counts = Counter(r.status for r in records)
    return [ChartSlice(name=name, value=counts[name], color=color) for name, color in STATUS_COLORS]


def reports_by_type(records: Iterable[ReportRecord]) -> list[TypeCount]:
    counts: Counter[str] = Counter()
    for r in records:
        counts[classify_type(r.title)] += 1
    out: list[TypeCount] = []
    for index, (label, n) in enumerate(counts.items()):
        color = TYPE_COLORS[min(index, len(TYPE_COLORS) - 1)]
        out.append(TypeCount(type=label, count=n, color=color))
    return out


def waste_categories(records: Iterable[ReportRecord]) -> list[ChartSlice]:
    counts = dict.fromkeys(CATEGORY_COLORS, 0)
    for r in records:
        category = r.title or OTHER
        counts[category if category in counts else OTHER] += 1
    return [
        ChartSlice(name=name, value=n, color=CATEGORY_COLORS[name])
        for name, n in counts.items()
        if n > 0
    ]


def area_breakdown(
    records: Sequence[ReportRecord],
) -> tuple[list[AreaCount], list[AreaScore], list[AreaReports]]:
    totals: Counter[str] = Counter()
    resolved: Counter[str] = Counter()
    for r in records:
        area = resolve_area(r.location_details, r.latitude, r.longitude)
        totals[area] += 1
        if r.status == RESOLVED:
            resolved[area] += 1

    grand_total = sum(totals.values())
    by_area = [
        AreaCount(area=area, count=n, percentage=percentage(n, grand_total))
        for area, n in totals.items()
    ]
    # sorted() is stable, so ties keep first-seen order
    cleanest = sorted(
        (AreaScore(name=area, score=percentage(resolved[area], n)) for area, n in totals.items()),
        key=lambda a: a.score,
        reverse=True,
    )[:TOP_AREAS]
    most_reported = sorted(
        (AreaReports(name=area, reports=n) for area, n in totals.items()),
        key=lambda a: a.reports,
        reverse=True,
    )[:TOP_AREAS]
    return by_area, cleanest, most_reported


def timeline(records: Iterable[ReportRecord], *, today: date, tz: tzinfo) -> list[TimelinePoint]:
    counts: Counter[date] = Counter()
    for r in records:
        created = as_utc(r.created_at)
        if created is None:
            continue
        counts[created.astimezone(tz).date()] += 1
    return [
        TimelinePoint(date=day.isoformat(), display_date=_day_label(day), count=counts[day])
        for day in _local_days(today, TIMELINE_DAYS)
    ]


def resolution_metrics(
    resolved: Sequence[ReportRecord], *, now: datetime, today: date, tz: tzinfo
) -> ResolutionMetrics:
    days = [resolution_days(r) for r in resolved]
    on_time = sum(1 for d in days if d <= ON_TIME_DAYS)

    one_week_ago = now - TREND_WINDOW
    two_weeks_ago = now - 2 * TREND_WINDOW
    current: list[int] = []
    previous: list[int] = []
    per_day: dict[date, list[int]] = {}
    for r, d in zip(resolved, days):
        ts = resolution_timestamp(r)
        if ts is None:
            continue
        if ts >= one_week_ago:
            current.append(d)
        elif ts >= two_weeks_ago:
            previous.append(d)
        per_day.setdefault(ts.astimezone(tz).date(), []).append(d)

    current_avg = mean_rounded(current)
    previous_avg = mean_rounded(previous)
    if previous_avg > 0:
        change = current_avg - previous_avg
        direction = "faster" if current_avg < previous_avg else "slower"
    else:
        change = 0
        direction = "stable"

    weekly = [
        ResolutionPoint(
            date=day.isoformat(),
            display_date=_day_label(day),
            avg_time=mean_rounded(per_day.get(day, [])),
        )
        for day in _local_days(today, WEEKLY_DAYS)
    ]
    return ResolutionMetrics(
        average_resolution_time=mean_rounded(days),
        on_time_percentage=percentage(on_time, len(days)),
        delayed_percentage=percentage(len(days) - on_time, len(days)),
        trend=ResolutionTrend(
            current=current_avg, previous=previous_avg, change=change, direction=direction
        ),
        weekly_data=weekly,
    )


def top_reporters(records: Iterable[ReportRecord]) -> list[ReporterEntry]:
    reports: Counter[str] = Counter()
    resolved: Counter[str] = Counter()
    for r in records:
        name = r.reporter or ANONYMOUS
        reports[name] += 1
        if r.status == RESOLVED:
            resolved[name] += 1
    entries = [
        ReporterEntry(
            id=name,
            name=name,
            reports=n,
            resolved=resolved[name],
            points=n + resolved[name],
            resolution_rate=percentage(resolved[name], n),
        )
        for name, n in reports.items()
    ]
    entries.sort(key=lambda e: e.points, reverse=True)
    return entries[:TOP_REPORTERS]


def build_analytics(
    records: Sequence[ReportRecord], *, now: datetime, tz: tzinfo
) -> AnalyticsResponse:
    now = as_utc(now)
    today = now.astimezone(tz).date()
    resolved = [r for r in records if r.status == RESOLVED]
    by_area, cleanest, most_reported = area_breakdown(records)
    resolution = resolution_metrics(resolved, now=now, today=today, tz=tz)

    return AnalyticsResponse(
        metrics=AnalyticsMetrics(
            total_reports=len(records),
            resolution_rate=percentage(len(resolved), len(records)),
            avg_response_time=resolution.average_resolution_time,
            active_areas=len(by_area),
        ),
        status_distribution=status_distribution(records),
        reports_by_type=reports_by_type(records),
        waste_category_data=waste_categories(records),
        reports_by_area=by_area,
        cleanest_areas=cleanest,
        most_reported_areas=most_reported,
        timeline_data=timeline(records, today=today, tz=tz),
        resolution_metrics=resolution,
        top_reporters=top_reporters(records),
    )


class AnalyticsService:
    """Reads one snapshot of the report store and aggregates it."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        *,
        tz: tzinfo,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._tz = tz
        self._clock = clock

    async def compute(self) -> AnalyticsResponse:
        async with self._uow_factory() as uow:
            records = await uow.reports.snapshot()
        result = build_analytics(records, now=self._clock(), tz=self._tz)
        logger.info(
            "analytics_computed",
            total_reports=result.metrics.total_reports,
            active_areas=result.metrics.active_areas,
        )
        return result
