"""Pydantic schemas for the status endpoint."""

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    """Response body for GET /api/status."""

    success: bool = True
    status: str = Field(description="Human-readable service status")
    timestamp: str = Field(description="Server time (ISO 8601, UTC)")
    version: str
    auth_type: str = "nickname_only"
    directory: str = Field(description="Configured identity directory backend")
