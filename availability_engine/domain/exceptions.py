"""
Domain-specific exception hierarchy for the availability engine.
"""


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class ScheduleValidationError(AvailabilityError, ValueError):
    """Raised when a schedule, interval or wall-clock value breaks an invariant."""


class DurationParseError(AvailabilityError, ValueError):
    """Raised when a duration cannot be normalized and no fallback is allowed."""


class ScheduleSourceError(AvailabilityError):
    """Raised when schedule or occupancy data cannot be loaded."""


class ProfessionalNotFoundError(ScheduleSourceError):
    """Raised when the schedule source has no record of a professional."""


class ServiceNotFoundError(ScheduleSourceError):
    """Raised when a professional does not offer the requested service."""
