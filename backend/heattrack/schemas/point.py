from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FixCreate(BaseModel):
    """A position pushed by a client (phone, simulator)."""
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    # Defaults to the time the server receives it
    timestamp: Optional[datetime] = None


class FixQueued(BaseModel):
    queued: int
    pending: int


class LocationPointRead(BaseModel):
    id: int
    latitude: float
    longitude: float
    timestamp_utc: datetime

    model_config = ConfigDict(from_attributes=True)
