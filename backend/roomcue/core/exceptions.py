"""
RoomCue exceptions.

The matching engine itself is total over validated input; these cover the
few boundaries where input can be unusable.
"""


class RoomCueError(Exception):
    """Base error carrying a human-readable message and a stable error code."""

    error_code = "roomcue_error"

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code


class EmptyScanError(RoomCueError):
    """A room profile was requested from a scan with no observations."""

    error_code = "empty_scan"


class InvalidObservationError(RoomCueError, ValueError):
    """The vision provider returned text that is not a valid room observation."""

    error_code = "invalid_observation"


class InvalidTriggerKeyError(RoomCueError, ValueError):
    """A trigger key was requested for an unknown namespace or an empty value."""

    error_code = "invalid_trigger_key"


class SessionClosedError(RoomCueError):
    """An observation was sent to a recognition session after it was closed."""

    error_code = "session_closed"
