"""
Domain layer - Pure availability logic without external dependencies.
"""

from .aggregator import AggregatedAvailability, MultiServiceAggregator
from .availability_resolver import AvailabilityResolver
from .duration import DurationNormalizer, format_duration, normalize_duration
from .models import (
    AvailabilityQuery,
    AvailabilityResult,
    DaySchedule,
    Interval,
    OccupiedInterval,
    ServiceAvailabilityPolicy,
    SlotGrid,
    UnavailableReason,
    WallClock,
    Weekday,
    WeeklySchedule,
)
from .slot_generator import SlotGenerator

__all__ = [
    "AggregatedAvailability",
    "AvailabilityQuery",
    "AvailabilityResolver",
    "AvailabilityResult",
    "DaySchedule",
    "DurationNormalizer",
    "Interval",
    "MultiServiceAggregator",
    "OccupiedInterval",
    "ServiceAvailabilityPolicy",
    "SlotGenerator",
    "SlotGrid",
    "UnavailableReason",
    "WallClock",
    "Weekday",
    "WeeklySchedule",
    "format_duration",
    "normalize_duration",
]
