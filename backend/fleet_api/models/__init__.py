"""
ORM models. Importing this package registers every table with Base.metadata,
which Alembic and the test database fixture rely on.
"""

from fleet_api.models.role import Role, RoleName
from fleet_api.models.taxi import Taxi
from fleet_api.models.trajectory import Trajectory
from fleet_api.models.user import User

__all__ = ["Role", "RoleName", "Taxi", "Trajectory", "User"]
