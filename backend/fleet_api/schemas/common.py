"""
Fleet Management API — Shared Response Schemas
==============================================

What:  Error envelope, simple message and health payloads shared by routers.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "invalid_format",
            "message": "Incorrect date value: 2024-13-40",
            "details": {"value": "2024-13-40"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    mail: str = Field(description="Mail transport: configured, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
