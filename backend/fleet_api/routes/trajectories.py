"""
Fleet Management API — Trajectory Routes
========================================

What:  Day-by-day trajectory queries, latest positions and the emailed
       spreadsheet export.
Who:   Any authenticated caller.

Query parameters follow the public contract: `taxiId`, `date` (dd-MM-yyyy),
`page` (zero-based) and `limit`.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_api.database import get_db_session
from fleet_api.dependencies import get_current_principal, get_email_service
from fleet_api.schemas.common import ErrorResponse
from fleet_api.schemas.trajectory import ExportResponse, LatestPositionRecord, TrajectoryRecord
from fleet_api.services.email_service import EmailService
from fleet_api.services.spreadsheet_service import spreadsheet_service
from fleet_api.services.token_service import TokenPayload
from fleet_api.services.trajectory_service import trajectory_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/trajectories",
    tags=["Trajectories"],
    dependencies=[Depends(get_current_principal)],
)

_QUERY_ERRORS = {
    400: {"description": "Missing or malformed parameter", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    404: {"description": "Taxi not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=List[TrajectoryRecord],
    responses=_QUERY_ERRORS,
    summary="Samples of one taxi on one day",
)
async def get_trajectories(
    taxi_id: Optional[int] = Query(default=None, alias="taxiId"),
    date: Optional[str] = Query(default=None, description="Day in dd-MM-yyyy format"),
    page: int = Query(default=0, ge=0),
    limit: int = Query(default=10, gt=0, le=1000),
    db: AsyncSession = Depends(get_db_session),
) -> List[TrajectoryRecord]:
    return await trajectory_service.get_trajectories(db, taxi_id, date, page, limit)


@router.get(
    "/latest",
    response_model=List[LatestPositionRecord],
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Most recent sample of every taxi",
)
async def get_latest_trajectories(
    page: int = Query(default=0, ge=0),
    limit: int = Query(default=10, gt=0, le=1000),
    db: AsyncSession = Depends(get_db_session),
) -> List[LatestPositionRecord]:
    return await trajectory_service.get_latest_trajectories(db, page, limit)


@router.get(
    "/export",
    response_model=ExportResponse,
    responses={
        **_QUERY_ERRORS,
        502: {"description": "Mail transport failed", "model": ErrorResponse},
        504: {"description": "Mail transport timed out", "model": ErrorResponse},
    },
    summary="Email a spreadsheet of one taxi's day",
)
async def export_trajectories(
    email: EmailStr = Query(description="Recipient of the spreadsheet"),
    taxi_id: Optional[int] = Query(default=None, alias="taxiId"),
    date: Optional[str] = Query(default=None, description="Day in dd-MM-yyyy format"),
    db: AsyncSession = Depends(get_db_session),
    email_service: EmailService = Depends(get_email_service),
    principal: TokenPayload = Depends(get_current_principal),
) -> ExportResponse:
    """
    Build the full (unpaginated) day as an .xlsx and mail it to `email`.

    Fails before sending anything if the taxi or date is invalid.
    """
    records = await trajectory_service.get_export_data(db, taxi_id, date)
    workbook = spreadsheet_service.build_trajectory_workbook(records)
    await email_service.send_with_excel_attachment(email, taxi_id, date.strip(), workbook)

    logger.info(
        "User id=%s exported %d samples of taxi %s on %s",
        principal.user_id, len(records), taxi_id, date,
    )
    return ExportResponse(message=f"Report sent to {email}", records=len(records))
