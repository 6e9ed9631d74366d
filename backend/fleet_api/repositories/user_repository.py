"""
Fleet Management API — Credential Store
=======================================

What:  User and role lookups for authentication and registration.
"""

import logging
from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError

from fleet_api.exceptions import DuplicateEmailError
from fleet_api.models.role import Role, RoleName
from fleet_api.models.user import User
from fleet_api.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository):
    """Users keyed by id and by (unique) email."""

    async def find_by_email(self, email: str) -> Optional[User]:
        """SELECT ... FROM users JOIN roles WHERE email = :email"""
        result = await self._execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists_by_id(self, user_id: int) -> bool:
        result = await self._execute(select(exists().where(User.id == user_id)))
        return bool(result.scalar())

    async def exists_by_email(self, email: str) -> bool:
        result = await self._execute(select(exists().where(User.email == email)))
        return bool(result.scalar())

    async def add(self, user: User) -> User:
        """
        Insert a user and flush so its id is assigned.

        Raises:
            DuplicateEmailError: the unique constraint on email fired
                (a concurrent registration won the race).
        """
        self.db.add(user)
        try:
            await self._flush()
        except IntegrityError:
            await self.db.rollback()
            logger.warning("Unique constraint rejected user %s", user.email)
            raise DuplicateEmailError(user.email)
        return user


class RoleRepository(BaseRepository):
    """Seeded, read-only roles."""

    async def find_by_role_name(self, role_name: RoleName) -> Optional[Role]:
        result = await self._execute(select(Role).where(Role.role_name == role_name))
        return result.scalar_one_or_none()
