"""Error types raised by the workday tracker."""


class WorkdayTrackerError(Exception):
    """Base class for workday tracker errors."""


class InvalidEventError(WorkdayTrackerError, ValueError):
    """Raised when a raw record cannot be turned into a time entry."""


class WriteError(WorkdayTrackerError):
    """Raised when appending a time entry fails."""


class NotAuthenticatedError(WorkdayTrackerError):
    """Raised when an operation runs without a user identity."""


class RangeFetchError(WorkdayTrackerError):
    """Raised when any part of a historical range cannot be fetched."""
