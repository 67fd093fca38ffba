"""Error taxonomy for the tracker.

Storage errors wrap the underlying SQLAlchemy error so callers only need to
know which phase failed (init, write or read).
"""


class TrackerError(Exception):
    """Base class for tracker failures."""


class PermissionDenied(TrackerError):
    """Location permission was not granted; the session cannot start."""


class SourceError(TrackerError):
    """A location source could not be opened or parsed."""


class StorageError(TrackerError):
    pass


class StorageInitError(StorageError):
    """The point table could not be created or the database opened."""


class StorageWriteError(StorageError):
    pass


class StorageReadError(StorageError):
    pass
