"""Durable, time-ordered store of recorded location points."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from heattrack.core.errors import StorageInitError, StorageReadError, StorageWriteError
from heattrack.core.time_utils import to_naive_utc
from heattrack.db import Base, SessionLocal
from heattrack.models.location_point import LocationPoint
from heattrack.tracking.fix import LocationFix

logger = logging.getLogger(__name__)


class PointStore:
    """Thin repository over the `location_points` table.

    Every call opens its own session and commits before returning, so each
    append/clear/read is atomic on its own. There is a single writer (the
    sampling loop); no further locking is done here.
    """

    def __init__(self, session_factory=None) -> None:
        self._session_factory = session_factory or SessionLocal

    @property
    def bind(self):
        return self._session_factory.kw["bind"]

    def init(self) -> None:
        """Create the points table if it does not exist yet. Safe to repeat."""
        try:
            Base.metadata.create_all(bind=self.bind, tables=[LocationPoint.__table__])
        except SQLAlchemyError as exc:
            logger.error("Point store init failed: %s", exc)
            raise StorageInitError(str(exc)) from exc

    def append(self, fix: LocationFix) -> int:
        db = self._session_factory()
        try:
            point = LocationPoint(
                latitude=fix.latitude,
                longitude=fix.longitude,
                timestamp_utc=to_naive_utc(fix.timestamp),
            )
            db.add(point)
            db.commit()
            db.refresh(point)
            return point.id
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageWriteError(str(exc)) from exc
        finally:
            db.close()

    def clear_all(self) -> int:
        """Delete every point; returns how many were removed."""
        db = self._session_factory()
        try:
            deleted = db.query(LocationPoint).delete()
            db.commit()
            return deleted
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageWriteError(str(exc)) from exc
        finally:
            db.close()

    def all_ordered_by_time(self) -> list[LocationPoint]:
        # Ties on timestamp fall back to insertion order
        db = self._session_factory()
        try:
            return (
                db.query(LocationPoint)
                .order_by(LocationPoint.timestamp_utc, LocationPoint.id)
                .all()
            )
        except SQLAlchemyError as exc:
            raise StorageReadError(str(exc)) from exc
        finally:
            db.close()

    def count(self) -> int:
        db = self._session_factory()
        try:
            return db.query(LocationPoint).count()
        except SQLAlchemyError as exc:
            raise StorageReadError(str(exc)) from exc
        finally:
            db.close()
