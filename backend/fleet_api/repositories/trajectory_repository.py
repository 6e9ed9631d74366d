"""
Fleet Management API — Trajectory Store
=======================================

What:  Paginated and unpaginated trajectory queries.

Semantics:
    find_by_taxi_and_date:
        Filter:  taxi_id = :taxi_id AND :day <= date < :day + 1 day
        Sort:    id ascending (insertion order)
        Page:    OFFSET page * limit LIMIT limit; no paging when limit is None

    find_latest_locations:
        Filter:  one row per taxi, at its maximum date; ties go to the highest id
        Sort:    taxi_id
        Page:    OFFSET page * limit LIMIT limit
"""

from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import and_, func, select

from fleet_api.models.trajectory import Trajectory
from fleet_api.repositories.base import BaseRepository, paginate


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open [start, end) range covering one calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class TrajectoryRepository(BaseRepository):

    async def find_by_taxi_and_date(
        self,
        taxi_id: int,
        day: date,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Trajectory]:
        start, end = day_bounds(day)
        statement = (
            select(Trajectory)
            .where(
                Trajectory.taxi_id == taxi_id,
                Trajectory.date >= start,
                Trajectory.date < end,
            )
            .order_by(Trajectory.id)
        )
        result = await self._execute(paginate(statement, page, limit))
        return list(result.scalars().all())

    async def find_latest_locations(self, page: int, limit: int) -> List[Trajectory]:
        latest = (
            select(
                Trajectory.taxi_id.label("taxi_id"),
                func.max(Trajectory.date).label("max_date"),
            )
            .group_by(Trajectory.taxi_id)
            .subquery()
        )
        # several samples can share the maximum timestamp; keep the highest id
        latest_id = (
            select(func.max(Trajectory.id).label("id"))
            .select_from(Trajectory)
            .join(
                latest,
                and_(
                    Trajectory.taxi_id == latest.c.taxi_id,
                    Trajectory.date == latest.c.max_date,
                ),
            )
            .group_by(Trajectory.taxi_id)
            .subquery()
        )
        statement = (
            select(Trajectory)
            .join(latest_id, Trajectory.id == latest_id.c.id)
            .order_by(Trajectory.taxi_id)
        )
        result = await self._execute(paginate(statement, page, limit))
        return list(result.scalars().all())
