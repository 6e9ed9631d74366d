"""
Data-access layer: explicit parameterized queries over an AsyncSession.

Repositories never commit; the per-request session dependency owns the
transaction boundary.
"""

from fleet_api.repositories.taxi_repository import TaxiRepository
from fleet_api.repositories.trajectory_repository import TrajectoryRepository
from fleet_api.repositories.user_repository import RoleRepository, UserRepository

__all__ = ["RoleRepository", "TaxiRepository", "TrajectoryRepository", "UserRepository"]
