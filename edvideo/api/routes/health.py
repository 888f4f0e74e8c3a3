"""
Health check endpoint.

Used by load balancers and orchestrators to know the process is alive.
It deliberately does not check the object store: a slow or unreachable
bucket should not get a healthy process restarted.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel

from ..dependencies import SettingsDep

router = APIRouter()


class HealthResponse(BaseModel):
    """
    Health check response.

    Same shape on every call so monitoring tools can parse it.
    """
    status: str
    timestamp: str
    service: str


def _utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-01T00:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not check dependencies.",
)
async def health_check(settings: SettingsDep) -> HealthResponse:
    return HealthResponse(
        status="OK",
        timestamp=_utc_timestamp(),
        service=settings.app_title,
    )
