"""
Fleet Management API — Trajectory Model
=======================================

Each row is one timestamped positional sample of a taxi. A taxi's trajectory
for a calendar day is the set of its rows whose `date` falls on that day.

Query Patterns:
    - Samples of one taxi on one day:
      WHERE taxi_id = :id AND date >= :day AND date < :day + 1 ORDER BY id
      → idx_trajectories_taxi_date
    - Latest sample per taxi:
      JOIN (SELECT taxi_id, MAX(date) ... GROUP BY taxi_id)
      → idx_trajectories_taxi_date
"""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleet_api.database import Base
from fleet_api.models.taxi import Taxi


class Trajectory(Base):
    """A positional sample owned by exactly one taxi."""

    __tablename__ = "trajectories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    taxi_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("taxis.id", ondelete="CASCADE"),
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    # Eager-loaded: async sessions cannot lazy-load on attribute access
    taxi: Mapped[Taxi] = relationship(lazy="joined")

    __table_args__ = (
        Index("idx_trajectories_taxi_date", "taxi_id", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Trajectory(id={self.id}, taxi_id={self.taxi_id}, "
            f"date='{self.date}')>"
        )
