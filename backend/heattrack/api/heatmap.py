import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query

from heattrack.api.deps import get_tracking
from heattrack.core.errors import StorageReadError
from heattrack.tracking.session import TrackingSession

router = APIRouter(prefix="/heatmap", tags=["heatmap"])


@router.get("/")
async def get_heatmap(
    rebuild: bool = Query(False, description="Redraw from the store before returning"),
    tracking: TrackingSession = Depends(get_tracking),
):
    """Current overlay as a GeoJSON FeatureCollection (one Point per heat circle)."""
    if rebuild:
        try:
            points = await asyncio.to_thread(tracking.store.all_ordered_by_time)
        except StorageReadError as e:
            raise HTTPException(status_code=503, detail=f"Storage unavailable: {e}")
        tracking.renderer.render(points)
    return tracking.renderer.to_geojson()
