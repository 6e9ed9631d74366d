"""Fleet Management API — Taxi catalogue lookups."""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fleet_api.repositories.taxi_repository import TaxiRepository
from fleet_api.schemas.trajectory import TaxiRecord
from fleet_api.services.trajectory_service import validate_pagination


class TaxiService:
    def __init__(self, query_timeout: float | None = None):
        self.query_timeout = query_timeout

    async def get_taxis(
        self,
        db: AsyncSession,
        plate: Optional[str],
        page: int,
        limit: int,
    ) -> List[TaxiRecord]:
        """Page of taxis whose plate contains `plate` (case-insensitive), ordered by id."""
        validate_pagination(page, limit)
        plate = plate.strip() if plate else None
        taxis = await TaxiRepository(db, self.query_timeout).find_by_plate(plate, page, limit)
        return [TaxiRecord.model_validate(taxi) for taxi in taxis]


taxi_service = TaxiService()
