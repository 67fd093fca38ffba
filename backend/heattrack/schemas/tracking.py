from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from heattrack.tracking.gate import GatePhase
from heattrack.tracking.status import StatusKind


class StatusEventRead(BaseModel):
    kind: StatusKind
    message: str
    at: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_m: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)


class TrackingStatusRead(BaseModel):
    running: bool
    phase: GatePhase
    point_count: Optional[int] = None  # None if the store could not be read
    latest: Optional[StatusEventRead] = None
    recent: list[StatusEventRead] = []
