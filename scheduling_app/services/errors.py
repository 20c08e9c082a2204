"""Error hierarchy for session scheduling.

The pure calendar functions only raise InvalidInput. The booking service
raises the rest, and the views map each class onto an HTTP status.
"""


class SchedulingError(Exception):
    """Base exception for all scheduling errors."""

    pass


class InvalidInput(SchedulingError):
    """A candidate session is missing its date or times, or they are malformed."""

    pass


class OverAssigned(SchedulingError):
    """The session would push a course past its budgeted hours."""

    def __init__(self, message, requested=0, available=0):
        super().__init__(message)
        self.requested = requested
        self.available = available


class SessionConflict(SchedulingError):
    """One or more experts are already booked at that date and time."""

    def __init__(self, message, expert_ids=()):
        super().__init__(message)
        self.expert_ids = list(expert_ids)


class SessionNotFound(SchedulingError):
    """The session does not exist (or no longer belongs to the course)."""

    pass
