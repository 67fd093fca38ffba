import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from heattrack.api.tracking import router as tracking_router
from heattrack.api.fixes import router as fixes_router
from heattrack.api.points import router as points_router
from heattrack.api.heatmap import router as heatmap_router
from heattrack.core.config import settings
from heattrack.core.errors import PermissionDenied, StorageInitError
from heattrack.tracking.session import build_session


logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    tracking = build_session(settings)
    app.state.tracking = tracking

    # Create the points table up front so reads work before the first start
    try:
        tracking.store.init()
    except StorageInitError as e:
        logger.error("Point store unavailable at startup: %s", e)

    if settings.autostart:
        try:
            await tracking.start()
        except (PermissionDenied, StorageInitError) as e:
            logger.warning("Autostart skipped: %s", e)

    yield

    await tracking.stop()


app = FastAPI(title="heattrack", lifespan=lifespan)

# Allow CORS for local frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tracking_router)
app.include_router(fixes_router)
app.include_router(points_router)
app.include_router(heatmap_router)


@app.get("/")
def root():
    return {"message": "heattrack backend is running"}
