"""
Fleet Management API — Trajectory Service
=========================================

What:  Validates trajectory query parameters, invokes the Trajectory Store and
       maps ORM rows to transfer records.
Who:   Called by the /api/trajectories routes.

Validation order (get_trajectories / get_export_data):
    1. taxi_id is None           → InvalidParameterError
    2. taxi does not exist       → NotFoundError
    3. date string None or empty → InvalidParameterError
    4. date not dd-MM-yyyy       → InvalidFormatError
    5. page < 0 or limit <= 0    → InvalidParameterError (paginated call only)

All operations are read-only.
"""

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fleet_api.exceptions import InvalidFormatError, InvalidParameterError, NotFoundError
from fleet_api.models.trajectory import Trajectory
from fleet_api.repositories.taxi_repository import TaxiRepository
from fleet_api.repositories.trajectory_repository import TrajectoryRepository
from fleet_api.schemas.trajectory import ExportRecord, LatestPositionRecord, TrajectoryRecord

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d-%m-%Y"


def parse_date(date_string: str) -> date:
    """
    Parse a ``dd-MM-yyyy`` string into a calendar date.

    Raises:
        InvalidFormatError: the string does not match the pattern or names an
            impossible date (e.g. "2024-13-40", "31-02-2024").
    """
    try:
        return datetime.strptime(date_string.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidFormatError(
            message=f"Incorrect date value: {date_string}",
            context={"value": date_string, "expected_format": "dd-MM-yyyy"},
        )


def validate_pagination(page: int, limit: int) -> None:
    if page is None or page < 0:
        raise InvalidParameterError("Page must be zero or greater.", field="page")
    if limit is None or limit <= 0:
        raise InvalidParameterError("Limit must be greater than zero.", field="limit")


def to_trajectory_record(entity: Trajectory) -> TrajectoryRecord:
    return TrajectoryRecord.model_validate(entity)


def to_latest_position_record(entity: Trajectory) -> LatestPositionRecord:
    return LatestPositionRecord(
        taxi_id=entity.taxi_id,
        plate=entity.taxi.plate,
        date=entity.date,
        latitude=entity.latitude,
        longitude=entity.longitude,
    )


def to_export_record(entity: Trajectory) -> ExportRecord:
    return ExportRecord(
        taxi_id=entity.taxi_id,
        plate=entity.taxi.plate,
        date=entity.date,
        latitude=entity.latitude,
        longitude=entity.longitude,
    )


class TrajectoryService:
    def __init__(self, query_timeout: float | None = None):
        self.query_timeout = query_timeout

    async def get_trajectories(
        self,
        db: AsyncSession,
        taxi_id: Optional[int],
        date_string: Optional[str],
        page: int,
        limit: int,
    ) -> List[TrajectoryRecord]:
        """
        One page of the samples a taxi recorded on a calendar day, in insertion order.

        Args:
            taxi_id: Taxi identifier (required)
            date_string: Day in dd-MM-yyyy format (required)
            page: Zero-based page index
            limit: Page size

        Returns:
            Possibly-empty list of TrajectoryRecord.
        """
        day = await self._validate_query(db, taxi_id, date_string)
        validate_pagination(page, limit)

        rows = await TrajectoryRepository(db, self.query_timeout).find_by_taxi_and_date(
            taxi_id, day, page=page, limit=limit
        )
        logger.debug(
            "Trajectories taxi=%s day=%s page=%d limit=%d → %d rows",
            taxi_id, day, page, limit, len(rows),
        )
        return [to_trajectory_record(row) for row in rows]

    async def get_latest_trajectories(
        self,
        db: AsyncSession,
        page: int,
        limit: int,
    ) -> List[LatestPositionRecord]:
        """One page of the most recent sample of every taxi, ordered by taxi id."""
        validate_pagination(page, limit)
        rows = await TrajectoryRepository(db, self.query_timeout).find_latest_locations(
            page, limit
        )
        return [to_latest_position_record(row) for row in rows]

    async def get_export_data(
        self,
        db: AsyncSession,
        taxi_id: Optional[int],
        date_string: Optional[str],
    ) -> List[ExportRecord]:
        """Every sample of the taxi on that day (no pagination), for spreadsheet export."""
        day = await self._validate_query(db, taxi_id, date_string)
        rows = await TrajectoryRepository(db, self.query_timeout).find_by_taxi_and_date(
            taxi_id, day
        )
        logger.info("Export data taxi=%s day=%s → %d rows", taxi_id, day, len(rows))
        return [to_export_record(row) for row in rows]

    async def _validate_query(
        self,
        db: AsyncSession,
        taxi_id: Optional[int],
        date_string: Optional[str],
    ) -> date:
        if taxi_id is None:
            raise InvalidParameterError("Missing taxiId value.", field="taxiId")

        if not await TaxiRepository(db, self.query_timeout).exists_by_id(taxi_id):
            raise NotFoundError(
                resource="taxi",
                resource_id=str(taxi_id),
                message=f"Taxi ID {taxi_id} not found.",
            )

        if date_string is None or not date_string.strip():
            raise InvalidParameterError("Missing date value.", field="date")

        return parse_date(date_string)


trajectory_service = TrajectoryService()
