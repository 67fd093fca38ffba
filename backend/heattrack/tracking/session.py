import asyncio
import logging
from typing import Optional

from heattrack.core.config import settings
from heattrack.core.errors import PermissionDenied, StorageInitError
from heattrack.render.heatmap import HeatmapRenderer
from heattrack.store import PointStore
from heattrack.tracking.fix import Accuracy
from heattrack.tracking.gate import GatePhase, GateState, MovementGate
from heattrack.tracking.loop import SamplingLoop
from heattrack.tracking.permissions import PermissionGate, PermissionStatus, SettingsPermissionGate
from heattrack.tracking.sources import LocationSource, QueueLocationSource, build_location_source
from heattrack.tracking.status import StatusEvent, StatusLog

logger = logging.getLogger(__name__)


class TrackingSession:
    """Owns at most one running SamplingLoop.

    `start()` plays the part of the map screen appearing: ask for permission,
    make sure the table exists, reset the gate and launch the loop.
    `stop()` is the screen going away.
    """

    def __init__(
        self,
        store: PointStore,
        source: LocationSource,
        renderer: HeatmapRenderer,
        permissions: PermissionGate,
        gate: Optional[MovementGate] = None,
        sample_period_s: float = settings.sample_period_s,
        fix_timeout_s: float = settings.fix_timeout_s,
        accuracy: Accuracy = Accuracy.best,
        status_history: int = settings.status_history,
    ) -> None:
        self.store = store
        self.source = source
        self.renderer = renderer
        self.permissions = permissions
        self.status = StatusLog(maxlen=status_history)
        self.loop = SamplingLoop(
            source=source,
            store=store,
            renderer=renderer,
            report=self.status,
            gate=gate,
            sample_period_s=sample_period_s,
            fix_timeout_s=fix_timeout_s,
            accuracy=accuracy,
        )
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        self.status(StatusEvent.initializing())

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def phase(self) -> GatePhase:
        return self.loop.state.phase

    async def start(self) -> None:
        """Start a fresh session, replacing any running one.

        Raises PermissionDenied or StorageInitError (both already reported)
        when the loop cannot start.
        """
        async with self._lock:
            await self._cancel_task()

            if isinstance(self.source, QueueLocationSource):
                stale = self.source.drain()
                if stale:
                    logger.info("Dropped %d fixes queued before this session", stale)

            status = await self.permissions.request_location_permission()
            if status != PermissionStatus.granted:
                self.status(StatusEvent.permission_denied())
                raise PermissionDenied("Location permission not granted")

            try:
                await asyncio.to_thread(self.store.init)
            except StorageInitError as exc:
                self.status(StatusEvent.init_error(exc))
                raise

            # Every session starts from scratch: no baseline, not moving
            state = GateState()
            self.loop.state = state
            self.status(StatusEvent.waiting_for_movement())
            self._task = asyncio.create_task(self.loop.run(state), name="sampling-loop")
            logger.info("Tracking session started")

    async def stop(self) -> None:
        async with self._lock:
            if await self._cancel_task():
                logger.info("Tracking session stopped")

    async def _cancel_task(self) -> bool:
        task, self._task = self._task, None
        if task is None:
            return False
        if not task.done():
            task.cancel()
        # Cancelling the caller still raises here; only the loop's own
        # cancellation is absorbed
        await asyncio.wait({task})
        if not task.cancelled() and task.exception() is not None:
            logger.error("Sampling loop had crashed", exc_info=task.exception())
        return True


def build_session(cfg=None, store: Optional[PointStore] = None) -> TrackingSession:
    """Wire a session from settings."""
    cfg = cfg or settings
    return TrackingSession(
        store=store or PointStore(),
        source=build_location_source(cfg),
        renderer=HeatmapRenderer(heat_radius_m=cfg.heat_radius_m),
        permissions=SettingsPermissionGate(cfg),
        gate=MovementGate(cfg.movement_threshold_m),
        sample_period_s=cfg.sample_period_s,
        fix_timeout_s=cfg.fix_timeout_s,
        accuracy=Accuracy(cfg.accuracy),
        status_history=cfg.status_history,
    )
