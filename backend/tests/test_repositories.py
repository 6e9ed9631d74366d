"""Repository base: statement timeouts and SQLAlchemy error translation."""

import asyncio
from datetime import date, datetime

import pytest
from sqlalchemy.exc import OperationalError

from fleet_api.exceptions import DatabaseError, OperationTimeoutError
from fleet_api.repositories import TaxiRepository
from fleet_api.repositories.trajectory_repository import day_bounds


class TestBaseRepository:

    @pytest.mark.asyncio
    async def test_slow_statement_times_out(self, mock_db_session):
        async def never_returns(*args, **kwargs):
            await asyncio.sleep(10)

        mock_db_session.execute.side_effect = never_returns

        with pytest.raises(OperationTimeoutError) as exc_info:
            await TaxiRepository(mock_db_session, timeout=0.01).exists_by_id(7)
        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_driver_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await TaxiRepository(mock_db_session).exists_by_id(7)
        assert exc_info.value.context == {"error_type": "OperationalError"}


def test_day_bounds_is_half_open_calendar_day():
    start, end = day_bounds(date(2024, 3, 1))
    assert start == datetime(2024, 3, 1, 0, 0)
    assert end == datetime(2024, 3, 2, 0, 0)
