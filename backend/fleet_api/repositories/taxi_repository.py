"""Fleet Management API — Taxi lookups."""

from typing import List, Optional

from sqlalchemy import exists, func, select

from fleet_api.models.taxi import Taxi
from fleet_api.repositories.base import BaseRepository, paginate


class TaxiRepository(BaseRepository):

    async def exists_by_id(self, taxi_id: int) -> bool:
        result = await self._execute(select(exists().where(Taxi.id == taxi_id)))
        return bool(result.scalar())

    async def find_by_plate(
        self,
        plate: Optional[str],
        page: int,
        limit: int,
    ) -> List[Taxi]:
        """
        Taxis whose plate contains `plate` (case-insensitive), ordered by id.
        An empty or None `plate` matches every taxi.
        """
        statement = select(Taxi)
        if plate:
            statement = statement.where(
                func.lower(Taxi.plate).contains(plate.lower(), autoescape=True)
            )
        statement = paginate(statement.order_by(Taxi.id), page, limit)
        result = await self._execute(statement)
        return list(result.scalars().all())
