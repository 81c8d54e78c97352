import os
import time

import psutil  # type: ignore[import-untyped]
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["Health"])

_SERVICES = ("catalog_service", "chat_service")


def _service_states(request: Request) -> dict:
    return {
        name.removesuffix("_service"): (
            "healthy" if getattr(request.app.state, name, None) else "initializing"
        )
        for name in _SERVICES
    }


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint that reports system resources and service status.

    Returns "initializing" until the catalog and chat services are wired up
    by the application lifespan.
    """
    cpu_percent = psutil.cpu_percent()
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage("/")

    services = _service_states(request)
    overall_status = (
        "healthy"
        if all(state == "healthy" for state in services.values())
        else "initializing"
    )

    return {
        "status": overall_status,
        "timestamp": int(time.time()),
        "build_id": os.getenv("BUILD_ID", "unknown"),
        "system": {
            "cpu_percent": cpu_percent,
            "memory_percent": memory.percent,
            "disk_percent": disk.percent,
        },
        "services": services,
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """
    Readiness probe: 503 until every service is available.
    """
    services = _service_states(request)
    if any(state != "healthy" for state in services.values()):
        return JSONResponse(
            status_code=503, content={"status": "not_ready", "services": services}
        )
    return {"status": "ready"}


@router.get("/health/live")
async def liveness_check():
    """
    Liveness probe that checks if the service is running.
    """
    return {"status": "alive"}
