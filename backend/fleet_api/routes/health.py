"""
Fleet Management API — Health Check Route
=========================================

What:  Liveness/readiness probe for containers and load balancers.
How:   Runs `SELECT 1` against the engine and reports whether SMTP is
       configured. No mail is sent by the probe.

Status levels:
    healthy:   database reachable (HTTP 200)
    degraded:  database reachable, SMTP host not configured (HTTP 200)
    unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fleet_api import __version__
from fleet_api.config import settings
from fleet_api.database import engine
from fleet_api.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def check_database() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return False
    return True


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(response: Response) -> HealthResponse:
    db_ok = await check_database()
    mail_status = "configured" if settings.mail_host else "not_configured"

    if not db_ok:
        overall = "unhealthy"
        response.status_code = 503
    elif mail_status != "configured":
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        database="connected" if db_ok else "disconnected",
        mail=mail_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
