from sqlalchemy import Column, DateTime, Float, Integer
from heattrack.db import Base
from heattrack.core.time_utils import ensure_utc


class LocationPoint(Base):
    __tablename__ = "location_points"

    # Assigned on insert; increases with every append
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    # Stored as naive UTC; SQLite has no timezone support
    timestamp_utc = Column(DateTime, nullable=False, index=True)

    @property
    def timestamp(self):
        """`timestamp_utc` as an aware UTC datetime."""
        return ensure_utc(self.timestamp_utc)

    def __repr__(self) -> str:
        return f"LocationPoint(id={self.id}, lat={self.latitude}, lon={self.longitude}, ts={self.timestamp_utc})"
