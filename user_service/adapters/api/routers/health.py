# user_service/adapters/api/routers/health.py
from datetime import datetime, timezone

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from user_service.adapters.api import responses
from user_service.core.ports.user_repository import IUserRepository
from user_service.shared.config import settings
from user_service.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/health", tags=["System"])


@router.get("", status_code=status.HTTP_200_OK)
async def liveness_probe():
    """
    Liveness Probe.
    Returns 200 OK if the process is serving requests.
    """
    return responses.success(
        "Server is healthy",
        data={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.APP_VERSION,
        },
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
@inject
async def readiness_probe(
    repo: IUserRepository = Depends(Provide[Container.user_repository]),
):
    """
    Readiness Probe.
    Returns 503 Service Unavailable if the storage backend is unreachable.
    """
    health_status = {"storage": "down"}

    try:
        if await repo.health_check():
            health_status["storage"] = "up"
    except Exception as e:
        logger.error("health_check_failed", component="storage", error=str(e))

    if health_status["storage"] != "up":
        logger.warning("readiness_probe_failed", status=health_status)
        return responses.failure(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Service not ready",
            error={"code": "unavailable", "detail": health_status},
        )

    return responses.success("Service is ready", data=health_status)
