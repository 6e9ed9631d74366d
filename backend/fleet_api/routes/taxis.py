"""Fleet Management API — Taxi catalogue route."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_api.database import get_db_session
from fleet_api.dependencies import get_current_principal
from fleet_api.schemas.trajectory import TaxiRecord
from fleet_api.services.taxi_service import taxi_service

router = APIRouter(
    prefix="/api/taxis",
    tags=["Taxis"],
    dependencies=[Depends(get_current_principal)],
)


@router.get("", response_model=List[TaxiRecord], summary="Search taxis by plate")
async def get_taxis(
    plate: Optional[str] = Query(default=None, description="Case-insensitive plate fragment"),
    page: int = Query(default=0, ge=0),
    limit: int = Query(default=10, gt=0, le=1000),
    db: AsyncSession = Depends(get_db_session),
) -> List[TaxiRecord]:
    return await taxi_service.get_taxis(db, plate, page, limit)
