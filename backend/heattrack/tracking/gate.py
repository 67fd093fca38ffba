"""Movement gate: decides when a session starts logging points.

The gate is a pure function of `(GateState, LocationFix)`. The sampling loop
owns the state value and threads it through each cycle, so a restart is
simply a fresh `GateState()`.

    AWAITING_BASELINE --first fix--> AWAITING_MOVEMENT
    AWAITING_MOVEMENT --distance >= threshold--> TRACKING
    TRACKING (terminal for the session)
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from heattrack.core.constants import MOVEMENT_THRESHOLD_M
from heattrack.core.geo import haversine_m
from heattrack.tracking.fix import LocationFix


class GatePhase(str, Enum):
    awaiting_baseline = "awaiting_baseline"
    awaiting_movement = "awaiting_movement"
    tracking = "tracking"


class GateVerdict(str, Enum):
    baseline_set = "baseline_set"
    waiting = "waiting"
    movement_started = "movement_started"
    record = "record"


@dataclass(frozen=True)
class GateState:
    baseline: Optional[LocationFix] = None
    movement_started: bool = False

    @property
    def phase(self) -> GatePhase:
        if self.baseline is None:
            return GatePhase.awaiting_baseline
        if not self.movement_started:
            return GatePhase.awaiting_movement
        return GatePhase.tracking


@dataclass(frozen=True)
class GateDecision:
    verdict: GateVerdict
    # Distance from baseline; only set while gating
    distance_m: Optional[float] = None

    @property
    def should_record(self) -> bool:
        return self.verdict in (GateVerdict.movement_started, GateVerdict.record)


class MovementGate:
    def __init__(self, threshold_m: float = MOVEMENT_THRESHOLD_M) -> None:
        if threshold_m < 0:
            raise ValueError("threshold_m must be >= 0")
        self.threshold_m = threshold_m

    def evaluate(self, state: GateState, fix: LocationFix) -> tuple[GateState, GateDecision]:
        """Feed one fix through the gate.

        Returns the next state and what the caller should do with the fix.
        A `movement_started` verdict means: clear history, then record.
        """
        phase = state.phase

        if phase is GatePhase.awaiting_baseline:
            return replace(state, baseline=fix), GateDecision(GateVerdict.baseline_set)

        if phase is GatePhase.tracking:
            return state, GateDecision(GateVerdict.record)

        moved_m = haversine_m(
            state.baseline.latitude,
            state.baseline.longitude,
            fix.latitude,
            fix.longitude,
        )
        if moved_m < self.threshold_m:
            return state, GateDecision(GateVerdict.waiting, distance_m=moved_m)

        # Baseline is kept as-is; no re-baselining once tracking
        return replace(state, movement_started=True), GateDecision(GateVerdict.movement_started, distance_m=moved_m)
