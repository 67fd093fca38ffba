"""Heatmap overlay.

Stands in for the map widget: it holds the circles currently drawn and the
visible region, and exposes them as GeoJSON. Every full render replaces the
overlay with a new immutable snapshot, so readers never see a half-drawn map.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from heattrack.core.constants import (
    HEAT_FILL_RGBA,
    HEAT_RADIUS_M,
    HEAT_STROKE_WIDTH,
    RECENTER_RADIUS_KM,
    RENDER_RADIUS_KM,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Circle:
    latitude: float
    longitude: float
    radius_m: float
    fill_rgba: tuple = HEAT_FILL_RGBA
    stroke_width: int = HEAT_STROKE_WIDTH


@dataclass(frozen=True)
class MapRegion:
    latitude: float
    longitude: float
    radius_km: float


@dataclass(frozen=True)
class Overlay:
    circles: tuple = field(default_factory=tuple)
    region: Optional[MapRegion] = None
    # Bumped on every change; lets clients poll cheaply
    version: int = 0


class Renderer(Protocol):
    def clear(self) -> None: ...
    def recenter(self, latitude: float, longitude: float, radius_km: float = RECENTER_RADIUS_KM) -> None: ...
    def render(self, points: Sequence) -> None: ...


class HeatmapRenderer:
    def __init__(self, heat_radius_m: float = HEAT_RADIUS_M) -> None:
        self.heat_radius_m = heat_radius_m
        self._overlay = Overlay()

    def snapshot(self) -> Overlay:
        return self._overlay

    def clear(self) -> None:
        """Remove every circle; the view stays where it is."""
        cur = self._overlay
        self._overlay = Overlay(circles=(), region=cur.region, version=cur.version + 1)

    def recenter(self, latitude: float, longitude: float, radius_km: float = RECENTER_RADIUS_KM) -> None:
        cur = self._overlay
        self._overlay = Overlay(
            circles=cur.circles,
            region=MapRegion(latitude, longitude, radius_km),
            version=cur.version + 1,
        )

    def render(self, points: Sequence) -> None:
        """Redraw the full point history and center on the most recent point.

        `points` must be ordered by time (anything with latitude/longitude).
        An empty history leaves the overlay untouched.
        """
        if not points:
            return
        last = points[-1]
        circles = tuple(Circle(p.latitude, p.longitude, self.heat_radius_m) for p in points)
        self._overlay = Overlay(
            circles=circles,
            region=MapRegion(last.latitude, last.longitude, RENDER_RADIUS_KM),
            version=self._overlay.version + 1,
        )
        logger.debug("Rendered %d heat circles", len(circles))

    def to_geojson(self) -> dict:
        overlay = self._overlay
        features = [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [c.longitude, c.latitude]},
                "properties": {
                    "radius_m": c.radius_m,
                    "fill": "rgba({}, {}, {}, {})".format(*c.fill_rgba),
                    "stroke_width": c.stroke_width,
                },
            }
            for c in overlay.circles
        ]
        region = None
        if overlay.region is not None:
            region = {
                "center": [overlay.region.longitude, overlay.region.latitude],
                "radius_km": overlay.region.radius_km,
            }
        return {
            "type": "FeatureCollection",
            "features": features,
            "region": region,
            "version": overlay.version,
        }
