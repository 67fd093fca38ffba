"""Fixed-interval sampling loop.

One cycle per tick:

    fix = source.get_fix()              -> None: report unavailable, done
    state, decision = gate.evaluate()   -> baseline/waiting: report, done
    movement_started: store.clear_all() + renderer.clear()
    store.append(fix); renderer.recenter(); renderer.render(store.all())

Store calls run in a worker thread but are awaited one after the other, so a
render always sees the store after the append of its own cycle.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from heattrack.core.constants import FIX_TIMEOUT_S, RECENTER_RADIUS_KM, SAMPLE_PERIOD_S
from heattrack.render.heatmap import Renderer
from heattrack.store import PointStore
from heattrack.tracking.fix import Accuracy, LocationFix
from heattrack.tracking.gate import GateState, GateVerdict, MovementGate
from heattrack.tracking.sources import LocationSource
from heattrack.tracking.status import StatusEvent, StatusReporter

logger = logging.getLogger(__name__)


class CycleOutcome(str, Enum):
    unavailable = "unavailable"
    baseline_set = "baseline_set"
    waiting = "waiting"
    saved = "saved"
    error = "error"


class PeriodicTicker:
    """asyncio take on a periodic timer.

    Ticks are due every `period` seconds from the first wait. If a cycle
    overruns, the missed ticks collapse into one immediate tick.
    """

    def __init__(self, period: float) -> None:
        if period <= 0:
            raise ValueError("period must be > 0")
        self.period = period
        self._next: Optional[float] = None

    async def wait_for_next_tick(self) -> None:
        loop = asyncio.get_running_loop()
        if self._next is None:
            self._next = loop.time() + self.period
        delay = self._next - loop.time()
        if delay > 0:
            await asyncio.sleep(delay)
        now = loop.time()
        while self._next <= now:
            self._next += self.period


class SamplingLoop:
    def __init__(
        self,
        source: LocationSource,
        store: PointStore,
        renderer: Renderer,
        report: StatusReporter,
        gate: Optional[MovementGate] = None,
        sample_period_s: float = SAMPLE_PERIOD_S,
        fix_timeout_s: float = FIX_TIMEOUT_S,
        accuracy: Accuracy = Accuracy.best,
    ) -> None:
        self.source = source
        self.store = store
        self.renderer = renderer
        self.report = report
        self.gate = gate or MovementGate()
        self.sample_period_s = sample_period_s
        self.fix_timeout_s = fix_timeout_s
        self.accuracy = Accuracy(accuracy)
        # Latest committed gate state; read-only view for status endpoints
        self.state = GateState()
        self.cycles = 0

    async def run(self, state: Optional[GateState] = None) -> None:
        """Sample until the task running this coroutine is cancelled."""
        self.state = state or GateState()
        self.cycles = 0
        ticker = PeriodicTicker(self.sample_period_s)
        logger.info(
            "Sampling every %.1fs (fix timeout %.1fs, threshold %.0fm)",
            self.sample_period_s,
            self.fix_timeout_s,
            self.gate.threshold_m,
        )
        try:
            while True:
                await ticker.wait_for_next_tick()
                self.state, _ = await self.run_cycle(self.state)
        except asyncio.CancelledError:
            logger.info("Sampling loop stopped after %d cycles", self.cycles)
            raise

    async def run_cycle(self, state: GateState) -> tuple[GateState, CycleOutcome]:
        """Run one sampling cycle and return the next gate state.

        Errors end the cycle, not the loop. Cancellation propagates.
        """
        self.cycles += 1
        try:
            fix = await self.source.get_fix(self.accuracy, self.fix_timeout_s)
        except Exception as exc:
            logger.exception("Fix acquisition failed")
            self.report(StatusEvent.error(exc))
            return state, CycleOutcome.error

        if fix is None:
            self.report(StatusEvent.unavailable())
            return state, CycleOutcome.unavailable

        state, decision = self.gate.evaluate(state, fix)
        # Committed with the transition, ahead of the store writes
        self.state = state

        if decision.verdict is GateVerdict.baseline_set:
            self.report(StatusEvent.baseline_set(fix.latitude, fix.longitude))
            return state, CycleOutcome.baseline_set

        if decision.verdict is GateVerdict.waiting:
            self.report(StatusEvent.waiting(decision.distance_m))
            return state, CycleOutcome.waiting

        try:
            if decision.verdict is GateVerdict.movement_started:
                # Start fresh: drop whatever was logged before this session moved
                cleared = await asyncio.to_thread(self.store.clear_all)
                self.renderer.clear()
                logger.info("Movement started %.0fm from baseline; cleared %d points", decision.distance_m, cleared)
                self.report(StatusEvent.movement_started(decision.distance_m))

            await self._save(fix)
        except Exception as exc:
            logger.exception("Cycle failed while saving fix")
            self.report(StatusEvent.error(exc))
            return state, CycleOutcome.error

        return state, CycleOutcome.saved

    async def _save(self, fix: LocationFix) -> None:
        point_id = await asyncio.to_thread(self.store.append, fix)
        logger.debug("Saved point %s", point_id)
        self.report(StatusEvent.saved(fix.latitude, fix.longitude))
        self.renderer.recenter(fix.latitude, fix.longitude, RECENTER_RADIUS_KM)

        points = await asyncio.to_thread(self.store.all_ordered_by_time)
        self.renderer.render(points)
