from fastapi import APIRouter, Depends, File, UploadFile

from waste_tracker.api.deps import get_upload_service
from waste_tracker.schemas.common import ErrorResponse
from waste_tracker.schemas.upload import UploadResponse
from waste_tracker.services.uploads import UploadService

router = APIRouter(tags=["upload"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload a report photo",
    description="Accepts jpeg/png/gif/webp images up to the configured size limit (5MB).",
    responses={400: {"model": ErrorResponse, "description": "Missing, oversized or non-image file"}},
)
async def upload_photo(
    file: UploadFile | None = File(None),
    svc: UploadService = Depends(get_upload_service),
):
    return await svc.store(file)
