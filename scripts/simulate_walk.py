#!/usr/bin/env python3
"""
Walk a simulated device through a running heattrack backend.

Starts (or restarts) tracking, then pushes one fix per sampling period:
a few fixes standing still around the start point (the baseline phase),
followed by a straight walk that crosses the movement threshold and keeps
going.

Usage examples:
  - Local dev server:
      uvicorn heattrack.main:app --app-dir backend &
      python scripts/simulate_walk.py --base-url http://localhost:8000
  - Faster than real time (start the server with SAMPLE_PERIOD_S=0.5):
      python scripts/simulate_walk.py --base-url http://localhost:8000 --period 0.5
"""

from __future__ import annotations

import argparse
import math
import sys
import time
from typing import List, Tuple

try:
    import requests  # type: ignore
except Exception as exc:  # pragma: no cover
    print("This script requires the 'requests' package.\nInstall with: pip install requests", file=sys.stderr)
    raise


# Metres per degree of latitude (good enough for a simulation)
M_PER_DEG = 111_320.0


def walk_points(
    start_lat: float,
    start_lon: float,
    stationary: int,
    steps: int,
    step_m: float,
    bearing_deg: float,
) -> List[Tuple[float, float]]:
    """Return (lat, lon) pairs: `stationary` copies of the start, then a straight walk."""
    pts = [(start_lat, start_lon)] * stationary
    b = math.radians(bearing_deg)
    for i in range(1, steps + 1):
        d = i * step_m
        lat = start_lat + (d * math.cos(b)) / M_PER_DEG
        lon = start_lon + (d * math.sin(b)) / (M_PER_DEG * math.cos(math.radians(start_lat)))
        pts.append((lat, lon))
    return pts


def post_json(base_url: str, path: str, payload: dict | None = None) -> dict:
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    r = requests.post(url, json=payload, timeout=15)
    if r.status_code >= 300:
        raise RuntimeError(f"{path} -> HTTP {r.status_code}: {r.text}")
    return r.json()


def main() -> None:
    ap = argparse.ArgumentParser(description="Push a simulated walk to a heattrack backend")
    ap.add_argument("--base-url", required=True, help="API base URL (e.g., http://localhost:8000)")
    ap.add_argument("--lat", type=float, default=45.9620)
    ap.add_argument("--lon", type=float, default=-66.6500)
    ap.add_argument("--stationary", type=int, default=3, help="Fixes at the start point before walking")
    ap.add_argument("--steps", type=int, default=40)
    ap.add_argument("--step-m", type=float, default=7.0, help="Metres walked per fix (~1.4 m/s at 5 s)")
    ap.add_argument("--bearing", type=float, default=45.0)
    ap.add_argument("--period", type=float, default=5.0, help="Seconds between pushed fixes")
    ap.add_argument("--no-start", action="store_true", help="Do not (re)start tracking first")
    args = ap.parse_args()

    if not args.no_start:
        status = post_json(args.base_url, "tracking/start")
        print(f"Tracking: running={status['running']} phase={status['phase']}")

    pts = walk_points(args.lat, args.lon, args.stationary, args.steps, args.step_m, args.bearing)
    for i, (lat, lon) in enumerate(pts, 1):
        res = post_json(args.base_url, "fixes/", {"latitude": lat, "longitude": lon})
        print(f"[{i}/{len(pts)}] {lat:.6f}, {lon:.6f} (pending={res['pending']})")
        time.sleep(args.period)

    print("Walk complete.")


if __name__ == "__main__":
    main()
