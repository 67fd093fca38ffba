import asyncio
import io
from datetime import datetime, timezone

import pytest

from heattrack.core.config import Settings
from heattrack.core.errors import SourceError
from heattrack.tracking.fix import Accuracy, LocationFix
from heattrack.tracking.sources import (
    GpxReplaySource,
    QueueLocationSource,
    build_location_source,
    parse_gpx_fixes,
    read_fit_fixes,
    read_gpx_fixes,
)

from conftest import GPX_WALK as GPX, fix_at


def test_queue_source_hands_out_fixes_in_order():
    async def scenario():
        source = QueueLocationSource()
        source.extend([fix_at(1, 1), fix_at(2, 2)])
        first = await source.get_fix(Accuracy.best, timeout=0.1)
        second = await source.get_fix(Accuracy.best, timeout=0.1)
        return first, second, source.pending

    first, second, pending = asyncio.run(scenario())
    assert (first.latitude, second.latitude) == (1, 2)
    assert pending == 0


def test_queue_source_times_out_with_none():
    async def scenario():
        return await QueueLocationSource().get_fix(Accuracy.best, timeout=0.01)

    assert asyncio.run(scenario()) is None


def test_queue_source_drain_discards_pending():
    source = QueueLocationSource()
    source.extend([fix_at(1, 1), fix_at(2, 2), fix_at(3, 3)])

    assert source.drain() == 3
    assert source.pending == 0
    assert source.drain() == 0


def test_queue_source_is_bounded():
    source = QueueLocationSource(maxsize=2)

    assert source.extend([fix_at(1, 1), fix_at(2, 2), fix_at(3, 3)]) == 2
    with pytest.raises(asyncio.QueueFull):
        source.push(fix_at(4, 4))
    assert source.pending == 2


def test_queue_source_cancel_wins_over_ready_fix():
    async def scenario():
        source = QueueLocationSource()
        source.extend([fix_at(1, 1), fix_at(2, 2)])
        task = asyncio.create_task(source.get_fix(Accuracy.best, timeout=5.0))
        # One pass parks the task on its getter, the next lets the getter take a fix
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        task.cancel()
        await asyncio.wait({task}, timeout=1.0)
        return task

    assert asyncio.run(scenario()).cancelled()


def test_parse_gpx_track_points():
    fixes = parse_gpx_fixes(GPX)

    assert len(fixes) == 3
    assert (fixes[0].latitude, fixes[0].longitude) == (45.962, -66.65)
    assert fixes[1].timestamp == datetime(2025, 6, 1, 8, 0, 5, tzinfo=timezone.utc)
    # No <time>: stamped when read
    assert fixes[2].timestamp.tzinfo is not None


def test_invalid_gpx_raises_source_error():
    with pytest.raises(SourceError):
        parse_gpx_fixes("<not-gpx")


def test_gpx_replay_runs_dry(tmp_path):
    path = tmp_path / "walk.gpx"
    path.write_text(GPX, encoding="utf-8")
    source = GpxReplaySource(str(path))

    async def drain():
        return [await source.get_fix(Accuracy.best, 1.0) for _ in range(5)]

    got = asyncio.run(drain())
    assert all(isinstance(f, LocationFix) for f in got[:3])
    assert got[3:] == [None, None]
    assert source.remaining == 0


def test_missing_gpx_file(tmp_path):
    with pytest.raises(SourceError):
        read_gpx_fixes(str(tmp_path / "nope.gpx"))


def test_garbage_fit_raises_source_error():
    with pytest.raises(SourceError):
        read_fit_fixes(io.BytesIO(b"definitely not a fit file"))


def test_build_location_source(tmp_path):
    assert isinstance(build_location_source(Settings(location_source="queue")), QueueLocationSource)

    path = tmp_path / "walk.gpx"
    path.write_text(GPX, encoding="utf-8")
    source = build_location_source(Settings(location_source="GPX", replay_path=str(path)))
    assert isinstance(source, GpxReplaySource)
    assert source.remaining == 3


@pytest.mark.parametrize(
    "kwargs",
    [
        {"location_source": "gpx", "replay_path": ""},
        {"location_source": "fit", "replay_path": "/does/not/exist.fit"},
        {"location_source": "gpsd"},
    ],
)
def test_build_location_source_rejects_bad_config(kwargs):
    with pytest.raises(SourceError):
        build_location_source(Settings(**kwargs))
