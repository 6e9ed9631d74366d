"""
Fleet Management API — Repository Base
======================================

What:  Shared statement execution for every repository.
How:   Each statement runs under `asyncio.wait_for` with the configured
       timeout; timeouts become OperationTimeoutError and SQLAlchemy failures
       become DatabaseError. Both propagate to the global handler.
"""

import asyncio
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Executable

from fleet_api.config import settings
from fleet_api.exceptions import DatabaseError, OperationTimeoutError

logger = logging.getLogger(__name__)


class BaseRepository:
    def __init__(self, db: AsyncSession, timeout: float | None = None):
        self.db = db
        self.timeout = timeout if timeout is not None else settings.db_query_timeout

    async def _execute(self, statement: Executable) -> Any:
        try:
            return await asyncio.wait_for(self.db.execute(statement), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("%s: statement exceeded %.1fs", type(self).__name__, self.timeout)
            raise OperationTimeoutError(operation="database query", timeout=self.timeout)
        except SQLAlchemyError as e:
            logger.error("%s: query failed: %s", type(self).__name__, str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def _flush(self) -> None:
        """Flush pending writes; IntegrityError is left for the caller to interpret."""
        try:
            await asyncio.wait_for(self.db.flush(), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise OperationTimeoutError(operation="database write", timeout=self.timeout)
        except IntegrityError:
            raise
        except SQLAlchemyError as e:
            logger.error("%s: flush failed: %s", type(self).__name__, str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})


def paginate(statement, page: int | None, limit: int | None):
    """Apply zero-based page/limit to a select; both None means unpaginated."""
    if limit is None:
        return statement
    return statement.offset((page or 0) * limit).limit(limit)
