import os

# Use in-memory sqlite for tests; must be set before heattrack.db is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("LOCATION_SOURCE", "queue")
os.environ.setdefault("LOCATION_PERMISSION", "granted")

from datetime import datetime, timedelta, timezone

import pytest

from heattrack.db import make_engine, make_session_factory
from heattrack.render.heatmap import HeatmapRenderer
from heattrack.store import PointStore
from heattrack.tracking.fix import LocationFix
from heattrack.tracking.status import StatusLog

T0 = datetime(2025, 6, 1, 8, 0, 0, tzinfo=timezone.utc)

GPX_WALK = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><name>walk</name><trkseg>
    <trkpt lat="45.9620" lon="-66.6500"><time>2025-06-01T08:00:00Z</time></trkpt>
    <trkpt lat="45.9621" lon="-66.6502"><time>2025-06-01T08:00:05Z</time></trkpt>
    <trkpt lat="45.9625" lon="-66.6510"></trkpt>
  </trkseg></trk>
</gpx>
"""


def fix_at(lat: float, lon: float, seconds: int = 0) -> LocationFix:
    """Fix at T0 + seconds."""
    return LocationFix(lat, lon, T0 + timedelta(seconds=seconds))


class ScriptedSource:
    """Returns the scripted items in order, then None forever.

    An Exception instance in the script is raised instead of returned.
    """

    def __init__(self, items):
        self.items = list(items)
        self.requests = 0

    async def get_fix(self, accuracy, timeout):
        self.requests += 1
        if not self.items:
            return None
        item = self.items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def store():
    """Isolated, initialized point store on its own in-memory database."""
    engine = make_engine("sqlite+pysqlite:///:memory:")
    s = PointStore(make_session_factory(engine))
    s.init()
    yield s
    engine.dispose()


@pytest.fixture
def renderer():
    return HeatmapRenderer()


@pytest.fixture
def status_log():
    return StatusLog(maxlen=100)
