from fastapi import Request

from heattrack.tracking.session import TrackingSession


def get_tracking(request: Request) -> TrackingSession:
    # Built once in the app lifespan
    return request.app.state.tracking
