import asyncio
import io
import os

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from heattrack.api.deps import get_tracking
from heattrack.core.errors import SourceError
from heattrack.core.time_utils import utc_now
from heattrack.schemas.point import FixCreate, FixQueued
from heattrack.tracking.fix import LocationFix
from heattrack.tracking.session import TrackingSession
from heattrack.tracking.sources import QueueLocationSource, parse_gpx_fixes, read_fit_fixes

router = APIRouter(prefix="/fixes", tags=["fixes"])


def _queue_source(tracking: TrackingSession) -> QueueLocationSource:
    if not isinstance(tracking.source, QueueLocationSource):
        raise HTTPException(status_code=409, detail="Location source does not accept pushed fixes")
    return tracking.source


@router.post("/", response_model=FixQueued, status_code=202)
async def push_fix(payload: FixCreate, tracking: TrackingSession = Depends(get_tracking)):
    source = _queue_source(tracking)
    try:
        source.push(LocationFix(payload.latitude, payload.longitude, payload.timestamp or utc_now()))
    except asyncio.QueueFull:
        raise HTTPException(status_code=429, detail="Too many fixes waiting; retry after the next tick")
    return FixQueued(queued=1, pending=source.pending)


@router.post("/import", response_model=FixQueued, status_code=202)
async def import_track(
    file: UploadFile = File(...),
    tracking: TrackingSession = Depends(get_tracking),
):
    """Queue every point of an uploaded .gpx/.fit track, one per tick."""
    source = _queue_source(tracking)

    filename = file.filename or "import"
    ext = os.path.splitext(filename)[1].lower()
    if ext not in [".gpx", ".fit"]:
        raise HTTPException(status_code=400, detail="Only .gpx or .fit files are supported")

    data = await file.read()
    try:
        if ext == ".gpx":
            fixes = parse_gpx_fixes(data.decode("utf-8"))
        else:
            fixes = read_fit_fixes(io.BytesIO(data))
    except (SourceError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid file: {e}")

    queued = source.extend(fixes)
    return FixQueued(queued=queued, pending=source.pending)
