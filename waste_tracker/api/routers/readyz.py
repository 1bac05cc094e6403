from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from waste_tracker.api.deps import get_health_service
from waste_tracker.core.startup import is_migration_completed, last_migration_error
from waste_tracker.schemas.common import OkResponse
from waste_tracker.services.health import HealthService

router = APIRouter(prefix="/readyz", tags=["health"])


@router.get(
    "",
    response_model=OkResponse,
    summary="Readiness probe",
    description="503 until startup migrations finish, then SELECT 1 against the database.",
)
async def readyz(svc: HealthService = Depends(get_health_service)):
    if not is_migration_completed():
        payload = {
            "error": {
                "code": "migrations_pending",
                "message": "Database migrations are still running",
            }
        }
        detail = last_migration_error()
        if detail:
            payload["error"]["detail"] = detail
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=payload)
    return await svc.ok()
