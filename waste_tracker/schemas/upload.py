from __future__ import annotations

from waste_tracker.schemas.common import CamelModel


class UploadResponse(CamelModel):
    success: bool
    photo_url: str
