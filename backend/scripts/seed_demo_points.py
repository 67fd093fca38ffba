from datetime import timedelta
import math
import random

from heattrack.core.time_utils import utc_now
from heattrack.store import PointStore
from heattrack.tracking.fix import LocationFix


# Roughly 1 m in degrees of latitude
DEG_PER_M = 1 / 111_320.0


def demo_walk(center_lat: float, center_lon: float, n: int = 120, step_s: int = 5) -> list[LocationFix]:
    """A loop around `center` with some GPS-like jitter, one fix every `step_s`."""
    start = utc_now() - timedelta(seconds=n * step_s)
    radius_m = 250.0
    fixes = []
    for i in range(n):
        angle = 2 * math.pi * i / n
        jitter_lat = random.uniform(-5.0, 5.0) * DEG_PER_M
        jitter_lon = random.uniform(-5.0, 5.0) * DEG_PER_M
        lat = center_lat + radius_m * math.sin(angle) * DEG_PER_M + jitter_lat
        lon = center_lon + radius_m * math.cos(angle) * DEG_PER_M / math.cos(math.radians(center_lat)) + jitter_lon
        fixes.append(LocationFix(lat, lon, start + timedelta(seconds=i * step_s)))
    return fixes


def seed_demo_points(store: PointStore, center_lat: float = 45.9620, center_lon: float = -66.6500) -> int:
    """Replace the stored history with one demo walk."""
    store.init()
    store.clear_all()
    fixes = demo_walk(center_lat, center_lon)
    for fix in fixes:
        store.append(fix)
    print(f"Seeded {len(fixes)} demo points")
    return len(fixes)


def main():
    seed_demo_points(PointStore())


if __name__ == "__main__":
    main()
