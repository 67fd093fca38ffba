from enum import Enum
from typing import Protocol

from heattrack.core.config import settings


class PermissionStatus(str, Enum):
    granted = "granted"
    denied = "denied"


class PermissionGate(Protocol):
    async def request_location_permission(self) -> PermissionStatus: ...


class StaticPermissionGate:
    """Always answers with the same status."""

    def __init__(self, status: PermissionStatus = PermissionStatus.granted) -> None:
        self.status = PermissionStatus(status)
        self.requests = 0

    async def request_location_permission(self) -> PermissionStatus:
        self.requests += 1
        return self.status


class SettingsPermissionGate:
    """Answers from `settings.location_permission` on every request.

    Anything other than "granted" counts as denied.
    """

    def __init__(self, cfg=None) -> None:
        self.cfg = cfg or settings

    async def request_location_permission(self) -> PermissionStatus:
        if self.cfg.location_permission == PermissionStatus.granted.value:
            return PermissionStatus.granted
        return PermissionStatus.denied
