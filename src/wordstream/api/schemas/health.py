"""Health and operational response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy"]
    version: str
    timestamp: datetime
    uptime_seconds: float
    active_streams: int = Field(ge=0, description="Word streams currently emitting.")


class ResetResponse(BaseModel):
    status: Literal["ok"]
    message: str
