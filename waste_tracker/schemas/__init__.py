from .analytics import AnalyticsResponse
from .common import ErrorResponse, MessageResponse, OkResponse
from .report import (
    ReportCreateRequest,
    ReportCreatedResponse,
    ReportItem,
    ReportStats,
    ReportStatus,
    ReportStatusUpdateRequest,
)
from .upload import UploadResponse

__all__ = [
    "AnalyticsResponse",
    "ErrorResponse",
    "MessageResponse",
    "OkResponse",
    "ReportCreateRequest",
    "ReportCreatedResponse",
    "ReportItem",
    "ReportStats",
    "ReportStatus",
    "ReportStatusUpdateRequest",
    "UploadResponse",
]
