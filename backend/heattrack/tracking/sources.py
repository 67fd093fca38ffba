"""Location sources.

A source answers one request at a time: `get_fix(accuracy, timeout)` returns
a fix, or None if nothing usable arrived within `timeout` seconds. Timeouts
are the source's business; cancellation is just asyncio task cancellation
and must propagate.
"""

import asyncio
import logging
import os
from typing import Iterable, Optional, Protocol

import gpxpy
import gpxpy.gpx
from fitparse import FitFile, FitParseError

from heattrack.core.config import settings
from heattrack.core.constants import MAX_PENDING_FIXES
from heattrack.core.errors import SourceError
from heattrack.core.geo import semicircles_to_degrees
from heattrack.core.time_utils import ensure_utc
from heattrack.tracking.fix import Accuracy, LocationFix

logger = logging.getLogger(__name__)


class LocationSource(Protocol):
    async def get_fix(self, accuracy: Accuracy, timeout: float) -> Optional[LocationFix]: ...


class QueueLocationSource:
    """Fixes pushed in from outside (the HTTP API, a phone, a test).

    Each request takes the oldest pushed fix; if none arrives before the
    timeout the request yields None. The queue is bounded: `push` raises
    asyncio.QueueFull once `maxsize` fixes are waiting.
    """

    def __init__(self, maxsize: int = MAX_PENDING_FIXES) -> None:
        self._queue: asyncio.Queue[LocationFix] = asyncio.Queue(maxsize=maxsize)

    def push(self, fix: LocationFix) -> None:
        self._queue.put_nowait(fix)

    def extend(self, fixes: Iterable[LocationFix]) -> int:
        """Queue fixes until the queue is full; return how many were queued."""
        n = 0
        for fix in fixes:
            if self._queue.full():
                logger.warning("Fix queue full; dropped the rest of the batch after %d", n)
                break
            self.push(fix)
            n += 1
        return n

    def drain(self) -> int:
        """Discard every pending fix and return how many there were."""
        n = 0
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return n
            n += 1

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def get_fix(self, accuracy: Accuracy = Accuracy.best, timeout: float = 10.0) -> Optional[LocationFix]:
        getter = asyncio.ensure_future(self._queue.get())
        try:
            await asyncio.wait({getter}, timeout=timeout)
        except asyncio.CancelledError:
            getter.cancel()
            raise
        if getter.done():
            return getter.result()
        getter.cancel()
        return None


class ReplaySource:
    """Hands out a recorded track one fix per request.

    Once the track is exhausted every request yields None, which the loop
    reports as "unavailable".
    """

    def __init__(self, fixes: Iterable[LocationFix]) -> None:
        self._fixes = list(fixes)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._fixes) - self._pos

    async def get_fix(self, accuracy: Accuracy = Accuracy.best, timeout: float = 10.0) -> Optional[LocationFix]:
        if self._pos >= len(self._fixes):
            return None
        fix = self._fixes[self._pos]
        self._pos += 1
        return fix


class GpxReplaySource(ReplaySource):
    def __init__(self, path: str) -> None:
        super().__init__(read_gpx_fixes(path))
        self.path = path


class FitReplaySource(ReplaySource):
    def __init__(self, path: str) -> None:
        super().__init__(read_fit_fixes(path))
        self.path = path


def parse_gpx_fixes(text: str) -> list[LocationFix]:
    """Extract every track point of a GPX document as a fix.

    Points without a timestamp are stamped at read time.
    """
    try:
        gpx = gpxpy.parse(text)
    except gpxpy.gpx.GPXException as exc:
        raise SourceError(f"Invalid GPX: {exc}") from exc

    fixes: list[LocationFix] = []
    for track in gpx.tracks:
        for segment in track.segments:
            for p in segment.points:
                if p.time is not None:
                    fixes.append(LocationFix(p.latitude, p.longitude, ensure_utc(p.time)))
                else:
                    fixes.append(LocationFix(p.latitude, p.longitude))
    return fixes


def read_gpx_fixes(path: str) -> list[LocationFix]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            fixes = parse_gpx_fixes(f.read())
    except OSError as exc:
        raise SourceError(f"Cannot read GPX file {path}: {exc}") from exc
    logger.info("Loaded %d fixes from %s", len(fixes), path)
    return fixes


def read_fit_fixes(path) -> list[LocationFix]:
    """Extract positioned `record` messages of a FIT file as fixes.

    `path` may be a filename or a file-like object (uploads).
    """
    fixes: list[LocationFix] = []
    try:
        ff = FitFile(path)
        for record in ff.get_messages("record"):
            fields = {f.name: f.value for f in record}
            lat = semicircles_to_degrees(fields.get("position_lat"))
            lon = semicircles_to_degrees(fields.get("position_long"))
            if lat is None or lon is None:
                continue
            ts = fields.get("timestamp")
            if ts is not None:
                fixes.append(LocationFix(lat, lon, ensure_utc(ts)))
            else:
                fixes.append(LocationFix(lat, lon))
    except OSError as exc:
        raise SourceError(f"Cannot read FIT file {path}: {exc}") from exc
    except (FitParseError, ValueError) as exc:
        raise SourceError(f"Invalid FIT: {exc}") from exc
    logger.info("Loaded %d fixes from FIT track", len(fixes))
    return fixes


def build_location_source(cfg=None) -> LocationSource:
    """Create the source named by `cfg.location_source`."""
    cfg = cfg or settings
    kind = cfg.location_source
    if kind == "queue":
        return QueueLocationSource()
    if kind in ("gpx", "fit"):
        if not cfg.replay_path:
            raise SourceError(f"location_source={kind} needs replay_path")
        if not os.path.exists(cfg.replay_path):
            raise SourceError(f"Replay file not found: {cfg.replay_path}")
        return GpxReplaySource(cfg.replay_path) if kind == "gpx" else FitReplaySource(cfg.replay_path)
    raise SourceError(f"Unknown location_source: {kind!r}")
