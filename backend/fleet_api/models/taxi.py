"""Fleet Management API — Taxi Model."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fleet_api.database import Base


class Taxi(Base):
    """A taxi identified by its license plate; referenced by trajectories."""

    __tablename__ = "taxis"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plate: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Taxi(id={self.id}, plate='{self.plate}')>"
