"""
Health check endpoints for monitoring and orchestration (K8s, Docker, etc.)

- /health: Basic liveness check (always returns 200)
- /health/live: Alias for liveness probes
- /health/ready: Readiness check (storage reachable)
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from keydesk.api.dependencies import get_container
from keydesk.api.deps import Container

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "keydesk-api"


@router.get("/health")
async def health_check():
    """Returns 200 OK if the application is running."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/live")
async def health_check_live():
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/ready")
async def health_check_ready(container: Annotated[Container, Depends(get_container)]):
    """
    Readiness probe.

    Returns 503 when the database does not answer, so orchestrators stop
    routing traffic to this instance.
    """
    health_status = {"status": "ready", "checks": {}}

    if container.engine is None:
        health_status["checks"]["storage"] = "in_memory"
        return health_status

    try:
        async with container.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        health_status["checks"]["database"] = "healthy"
    except DBAPIError as e:
        logger.error("Readiness check: Database unhealthy", exc_info=e)
        health_status["status"] = "not_ready"
        health_status["checks"]["database"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status
