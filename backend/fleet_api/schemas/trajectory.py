"""
Fleet Management API — Trajectory & Taxi Transfer Records
=========================================================

What:  Read-only records the services map ORM rows into.
How:   `from_attributes` lets each record validate straight from an entity;
       fields that live on the owning taxi are pulled by the service.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TrajectoryRecord(BaseModel):
    """One positional sample of a taxi on the requested day."""
    id: int
    taxi_id: int
    date: datetime
    latitude: float
    longitude: float

    model_config = ConfigDict(from_attributes=True)


class LatestPositionRecord(BaseModel):
    """Most recent sample of one taxi."""
    taxi_id: int
    plate: str
    date: datetime
    latitude: float
    longitude: float


class ExportRecord(BaseModel):
    """Row of the spreadsheet export."""
    taxi_id: int
    plate: str
    date: datetime
    latitude: float
    longitude: float


class TaxiRecord(BaseModel):
    id: int
    plate: str

    model_config = ConfigDict(from_attributes=True)


class ExportResponse(BaseModel):
    message: str
    records: int = Field(description="Number of trajectory rows in the spreadsheet")
