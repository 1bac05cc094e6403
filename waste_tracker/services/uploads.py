"""Photo evidence uploads stored on the local filesystem."""

from __future__ import annotations

import time
from pathlib import Path

import anyio.to_thread
import structlog
from fastapi import UploadFile

from waste_tracker.core.exceptions import ValidationError
from waste_tracker.schemas.upload import UploadResponse

# stored extension comes from the validated type, never from the client filename
_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
ALLOWED_CONTENT_TYPES = frozenset(_EXTENSIONS)

logger = structlog.get_logger(__name__)


class UploadService:
    def __init__(self, upload_dir: str | Path, *, url_prefix: str, max_bytes: int) -> None:
        self._upload_dir = Path(upload_dir)
        self._url_prefix = url_prefix.rstrip("/")
        self._max_bytes = max_bytes

    async def store(self, file: UploadFile | None) -> UploadResponse:
        if file is None:
            raise ValidationError("No file uploaded")
        content_type = (file.content_type or "").lower()
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise ValidationError("Invalid file type. Only images are allowed.")

        data = await file.read()
        if len(data) > self._max_bytes:
            limit_mb = self._max_bytes // (1024 * 1024)
            raise ValidationError(f"File too large. Maximum size is {limit_mb}MB.")

        filename = f"report_{time.time_ns() // 1_000_000}.{_EXTENSIONS[content_type]}"
        target = self._upload_dir / filename
        await anyio.to_thread.run_sync(self._write, target, data)
        logger.info("photo_uploaded", filename=filename, size=len(data))
        return UploadResponse(success=True, photo_url=f"{self._url_prefix}/{filename}")

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
