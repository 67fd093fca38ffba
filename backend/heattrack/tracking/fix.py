from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from heattrack.core.time_utils import ensure_utc, utc_now


class Accuracy(str, Enum):
    """Accuracy hint handed to the location source."""
    lowest = "lowest"
    low = "low"
    medium = "medium"
    high = "high"
    best = "best"


@dataclass(frozen=True)
class LocationFix:
    """One reported device position at an instant."""
    latitude: float
    longitude: float
    timestamp: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        # Normalize so fixes from different sources compare and sort alike
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
