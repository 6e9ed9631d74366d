"""
Fleet Management API — Role Model
=================================

Roles are seeded by the initial migration and never mutated at runtime.
Many users reference one role.
"""

import enum
from typing import Dict, Optional

from sqlalchemy import Enum, Integer
from sqlalchemy.orm import Mapped, mapped_column

from fleet_api.database import Base


class RoleName(str, enum.Enum):
    """Closed set of role kinds a user can hold."""

    ADMIN = "ADMIN"
    USER = "USER"

    @property
    def authority(self) -> str:
        """Authority string carried in tokens, e.g. ``ROLE_ADMIN``."""
        return f"ROLE_{self.value}"

    @classmethod
    def lookup(cls, name: Optional[str]) -> Optional["RoleName"]:
        """Resolve a role name case-insensitively; None for unknown names."""
        if not name:
            return None
        return _ROLES_BY_NAME.get(name.strip().upper())


_ROLES_BY_NAME: Dict[str, RoleName] = {member.value: member for member in RoleName}


class Role(Base):
    """A role row; `role_name` is unique."""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role_name: Mapped[RoleName] = mapped_column(
        Enum(RoleName, name="role_name", native_enum=False, length=20),
        nullable=False,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, role_name='{self.role_name.value}')>"
