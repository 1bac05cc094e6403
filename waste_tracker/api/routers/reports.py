"""/reports routers; handlers stay thin and delegate to services."""

from fastapi import APIRouter, Depends, status

from waste_tracker.api.deps import get_analytics_service, get_report_service
from waste_tracker.schemas.analytics import AnalyticsResponse
from waste_tracker.schemas.common import ErrorResponse, MessageResponse
from waste_tracker.schemas.report import (
    ReportCreatedResponse,
    ReportCreateRequest,
    ReportItem,
    ReportStats,
    ReportStatusUpdateRequest,
)
from waste_tracker.services.analytics import AnalyticsService
from waste_tracker.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])

_ID_ERRORS = {
    400: {"model": ErrorResponse, "description": "Malformed report id"},
    404: {"model": ErrorResponse, "description": "Report not found"},
}


@router.post(
    "",
    response_model=ReportCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a waste report",
    responses={400: {"model": ErrorResponse, "description": "Missing title or description"}},
)
async def create_report(
    payload: ReportCreateRequest,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.create(payload)


@router.get("", response_model=list[ReportItem], summary="All reports, newest first")
async def list_reports(svc: ReportService = Depends(get_report_service)):
    return await svc.list()


@router.get("/stats", response_model=ReportStats, summary="Headline counters")
async def report_stats(svc: ReportService = Depends(get_report_service)):
    return await svc.stats()


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    summary="Aggregated analytics",
    description=(
        "Recomputed from the full report collection on every call: status and type "
        "breakdowns, area grouping, 30-day timeline, resolution statistics and the "
        "reporter leaderboard."
    ),
)
async def report_analytics(svc: AnalyticsService = Depends(get_analytics_service)):
    return await svc.compute()


@router.get("/{report_id}", response_model=ReportItem, responses=_ID_ERRORS)
async def get_report(report_id: str, svc: ReportService = Depends(get_report_service)):
    return await svc.get(report_id)


@router.patch(
    "/{report_id}",
    response_model=MessageResponse,
    summary="Change report status",
    responses=_ID_ERRORS,
)
async def update_report_status(
    report_id: str,
    payload: ReportStatusUpdateRequest | None = None,
    svc: ReportService = Depends(get_report_service),
):
    return await svc.update_status(report_id, payload.status if payload else None)


@router.delete("/{report_id}", response_model=MessageResponse, responses=_ID_ERRORS)
async def delete_report(report_id: str, svc: ReportService = Depends(get_report_service)):
    return await svc.delete(report_id)
