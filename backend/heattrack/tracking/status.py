"""Status reporting channel.

Events are emitted synchronously at fixed points of the session and loop.
The wording matches what the map screen used to show; the `kind` is what
callers should branch on.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from heattrack.core.time_utils import utc_now

logger = logging.getLogger(__name__)


class StatusKind(str, Enum):
    initializing = "initializing"
    permission_denied = "permission_denied"
    init_error = "init_error"
    waiting_for_movement = "waiting_for_movement"
    baseline_set = "baseline_set"
    waiting = "waiting"
    movement_started = "movement_started"
    saved = "saved"
    unavailable = "unavailable"
    error = "error"


@dataclass(frozen=True)
class StatusEvent:
    kind: StatusKind
    message: str
    at: datetime = field(default_factory=utc_now)
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_m: Optional[float] = None

    @classmethod
    def initializing(cls):
        return cls(StatusKind.initializing, "Initializing...")

    @classmethod
    def permission_denied(cls):
        return cls(StatusKind.permission_denied, "Location permission not granted.")

    @classmethod
    def init_error(cls, exc: BaseException):
        return cls(StatusKind.init_error, f"Init error: {exc}")

    @classmethod
    def waiting_for_movement(cls):
        return cls(StatusKind.waiting_for_movement, "Waiting for movement…")

    @classmethod
    def baseline_set(cls, latitude: float, longitude: float):
        return cls(
            StatusKind.baseline_set,
            "Baseline set. Waiting for movement…",
            latitude=latitude,
            longitude=longitude,
        )

    @classmethod
    def waiting(cls, distance_m: float):
        return cls(StatusKind.waiting, f"Waiting for movement… moved {distance_m:.0f}m", distance_m=distance_m)

    @classmethod
    def movement_started(cls, distance_m: Optional[float] = None):
        return cls(StatusKind.movement_started, "Movement started ✅ Logging now…", distance_m=distance_m)

    @classmethod
    def saved(cls, latitude: float, longitude: float):
        return cls(
            StatusKind.saved,
            f"Saved: {latitude:.6f}, {longitude:.6f}",
            latitude=latitude,
            longitude=longitude,
        )

    @classmethod
    def unavailable(cls):
        return cls(StatusKind.unavailable, "Location unavailable…")

    @classmethod
    def error(cls, exc: BaseException):
        return cls(StatusKind.error, f"Track error: {exc}")


StatusReporter = Callable[[StatusEvent], None]


class StatusLog:
    """Bounded in-memory history of status events.

    Callable, so it can be handed to the loop as its reporter.
    """

    def __init__(self, maxlen: int = 50) -> None:
        self._events: deque[StatusEvent] = deque(maxlen=maxlen)

    def __call__(self, event: StatusEvent) -> None:
        self._events.append(event)
        logger.info("[%s] %s", event.kind.value, event.message)

    @property
    def latest(self) -> Optional[StatusEvent]:
        return self._events[-1] if self._events else None

    def recent(self) -> list[StatusEvent]:
        return list(self._events)

    def of_kind(self, kind: StatusKind) -> list[StatusEvent]:
        return [e for e in self._events if e.kind is kind]

    def __len__(self) -> int:
        return len(self._events)
