import asyncio

from fastapi import APIRouter, Depends, HTTPException

from heattrack.api.deps import get_tracking
from heattrack.core.errors import StorageReadError, StorageWriteError
from heattrack.schemas.point import LocationPointRead
from heattrack.tracking.session import TrackingSession

router = APIRouter(prefix="/points", tags=["points"])


@router.get("/", response_model=list[LocationPointRead])
async def list_points(tracking: TrackingSession = Depends(get_tracking)):
    """Every recorded point, oldest first."""
    try:
        return await asyncio.to_thread(tracking.store.all_ordered_by_time)
    except StorageReadError as e:
        raise HTTPException(status_code=503, detail=f"Storage unavailable: {e}")


@router.delete("/")
async def clear_points(tracking: TrackingSession = Depends(get_tracking)):
    try:
        deleted = await asyncio.to_thread(tracking.store.clear_all)
    except StorageWriteError as e:
        raise HTTPException(status_code=503, detail=f"Storage unavailable: {e}")
    # The overlay only ever shows stored points
    tracking.renderer.clear()
    return {"deleted": deleted}
