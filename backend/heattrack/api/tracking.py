from fastapi import APIRouter, Depends, HTTPException

from heattrack.api.deps import get_tracking
from heattrack.core.errors import PermissionDenied, StorageInitError, StorageReadError
from heattrack.schemas.tracking import StatusEventRead, TrackingStatusRead
from heattrack.tracking.session import TrackingSession

router = APIRouter(prefix="/tracking", tags=["tracking"])


def _status(tracking: TrackingSession) -> TrackingStatusRead:
    try:
        point_count = tracking.store.count()
    except StorageReadError:
        point_count = None
    latest = tracking.status.latest
    return TrackingStatusRead(
        running=tracking.running,
        phase=tracking.phase,
        point_count=point_count,
        latest=StatusEventRead.model_validate(latest) if latest else None,
        recent=[StatusEventRead.model_validate(e) for e in tracking.status.recent()],
    )


@router.post("/start", response_model=TrackingStatusRead)
async def start_tracking(tracking: TrackingSession = Depends(get_tracking)):
    """Start (or restart) sampling. The movement gate starts over."""
    try:
        await tracking.start()
    except PermissionDenied as e:
        raise HTTPException(status_code=403, detail=str(e))
    except StorageInitError as e:
        raise HTTPException(status_code=503, detail=f"Storage unavailable: {e}")
    return _status(tracking)


@router.post("/stop", response_model=TrackingStatusRead)
async def stop_tracking(tracking: TrackingSession = Depends(get_tracking)):
    await tracking.stop()
    return _status(tracking)


@router.get("/status", response_model=TrackingStatusRead)
async def get_status(tracking: TrackingSession = Depends(get_tracking)):
    return _status(tracking)
