"""Session-level failures raised by route planning."""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class RoutePlanningError(Exception):
    """Base class for failures that abort a planning session."""

    kind = "route_planning_error"


class OriginReason(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


_ORIGIN_MESSAGES = {
    OriginReason.PERMISSION_DENIED: "Location denied. Allow location to calculate route from your position.",
    OriginReason.TIMEOUT: "Could not get your location in time.",
    OriginReason.UNSUPPORTED: "Geolocation not supported.",
}


class OriginUnavailable(RoutePlanningError):
    """The collector's starting point could not be acquired."""

    kind = "origin_unavailable"

    def __init__(self, reason: OriginReason, message: str | None = None):
        self.reason = OriginReason(reason)
        self.message = message or _ORIGIN_MESSAGES[self.reason]
        super().__init__(self.message)


class InsufficientDestinations(RoutePlanningError):
    """No report ended up with usable coordinates."""

    kind = "insufficient_destinations"

    def __init__(self, dropped_ids: Iterable[str] = ()):
        self.dropped_ids = frozenset(dropped_ids)
        if self.dropped_ids:
            message = (
                f"No locations with coordinates available: "
                f"{len(self.dropped_ids)} report(s) could not be located."
            )
        else:
            message = "No reports to route."
        super().__init__(message)


class SessionAlreadyUsed(RoutePlanningError):
    """A planning session was asked to run a second time."""

    kind = "session_already_used"

    def __init__(self, state: str):
        self.state = state
        super().__init__(f"Planning session already finished (state={state}); start a new session.")
