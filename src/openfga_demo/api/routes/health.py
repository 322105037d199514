from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from openfga_demo.authz.client import check_openfga_health
from openfga_demo.core.config import settings
from openfga_demo.core.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


class ReadinessResponse(BaseModel):
    status: str
    checks: dict[str, str]
    profile: str


@router.get("/health")
async def health_check() -> dict[str, str]:
    logger.info("Health check endpoint called")
    return {"status": "healthy"}


@router.get("/")
async def root() -> dict[str, str]:
    logger.info("Root endpoint called")
    return {"message": "Welcome to OpenFGA Demo API"}


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness(response: Response) -> ReadinessResponse:
    """Readiness probe.

    Reports whether the OpenFGA server answers its health endpoint.
    Returns 503 when it does not.
    """
    openfga_healthy = await check_openfga_health()
    checks = {"openfga": "ok" if openfga_healthy else "error"}

    if not openfga_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Readiness check failed", checks=checks)

    return ReadinessResponse(
        status="ok" if openfga_healthy else "degraded",
        checks=checks,
        profile=settings.PROFILE,
    )
