"""Exceptions raised by readtracker services."""


class ReadTrackerError(Exception):
    """Base error for readtracker."""

    pass


class NotFoundError(ReadTrackerError):
    """A referenced book or progress record does not exist."""

    pass


class ValidationError(ReadTrackerError, ValueError):
    """Input failed validation (goal below 1, unknown status, negative pages)."""

    pass
