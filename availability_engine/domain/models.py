"""
Domain models for wall-clock schedules, occupancy and availability results.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum, IntEnum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .exceptions import ScheduleValidationError

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True, order=True)
class WallClock:
    """
    A time of day with minute granularity, compared only within one calendar day.

    Stored as minutes since midnight. ``24:00`` is accepted so that a day may
    close at midnight; values never wrap into the next day.
    """
    minutes: int

    def __post_init__(self):
        if not 0 <= self.minutes <= MINUTES_PER_DAY:
            raise ScheduleValidationError(
                f"Wall-clock value out of range: {self.minutes} minutes"
            )

    @classmethod
    def of(cls, hour: int, minute: int = 0) -> "WallClock":
        if not 0 <= minute <= 59:
            raise ScheduleValidationError(f"Minute must be between 0 and 59, got {minute}")
        return cls(hour * 60 + minute)

    @classmethod
    def parse(cls, value: Union[str, time, "WallClock"]) -> "WallClock":
        """
        Parse ``H:MM``, ``HH:MM`` or ``HH:MM:SS`` (seconds are dropped).

        ``datetime.time`` instances and existing WallClock values are accepted
        as-is so callers can pass whatever their data layer hands them.
        """
        if isinstance(value, WallClock):
            return value
        if isinstance(value, time):
            return cls.of(value.hour, value.minute)

        parts = str(value).strip().split(":")
        if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
            raise ScheduleValidationError(f"Invalid wall-clock value: {value!r}")

        return cls.of(int(parts[0]), int(parts[1]))

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def add_minutes(self, minutes: int) -> "WallClock":
        return WallClock(self.minutes + minutes)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True)
class Interval:
    """
    A half-open wall-clock interval ``[start, end)`` on a single date.

    Invariant: start must be before end.
    """
    start: WallClock
    end: WallClock

    def __post_init__(self):
        if self.start >= self.end:
            raise ScheduleValidationError(
                f"Start time {self.start} must be before end time {self.end}"
            )

    @classmethod
    def between(cls, start: Union[str, WallClock], end: Union[str, WallClock]) -> "Interval":
        return cls(start=WallClock.parse(start), end=WallClock.parse(end))

    @classmethod
    def parse(cls, text: str) -> "Interval":
        """Parse the ``HH:MM-HH:MM`` form used on the command line."""
        start, sep, end = text.partition("-")
        if not sep:
            raise ScheduleValidationError(f"Expected HH:MM-HH:MM, got {text!r}")
        return cls.between(start, end)

    @classmethod
    def starting_at(cls, start: Union[str, WallClock], duration_minutes: int) -> "Interval":
        begin = WallClock.parse(start)
        return cls(start=begin, end=begin.add_minutes(duration_minutes))

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end.minutes - self.start.minutes

    def overlaps(self, other: "Interval") -> bool:
        """Half-open overlap: touching intervals do not conflict."""
        return self.start < other.end and self.end > other.start

    def contains(self, other: "Interval") -> bool:
        """Check if ``other`` lies wholly inside this interval."""
        return self.start <= other.start and other.end <= self.end

    def intersect(self, other: "Interval") -> Optional["Interval"]:
        """
        Calculate the intersection of two intervals.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        return Interval(start=max(self.start, other.start), end=min(self.end, other.end))

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


# An existing appointment or blocked period on the target date.
OccupiedInterval = Interval


class Weekday(IntEnum):
    """Weekdays numbered like ``date.weekday()`` (Monday = 0)."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def from_name(cls, name: Union[str, "Weekday"]) -> "Weekday":
        if isinstance(name, Weekday):
            return name
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ScheduleValidationError(f"Unknown weekday: {name!r}") from None

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return cls(day.weekday())

    @property
    def key(self) -> str:
        """Lowercase record key, e.g. ``"monday"``."""
        return self.name.lower()


@dataclass(frozen=True)
class DaySchedule:
    """
    Open/closed state and opening hours for one weekday.

    A closed day carries no times; an open day needs ``open < close``
    within the same day.
    """
    is_open: bool
    open: Optional[WallClock] = None
    close: Optional[WallClock] = None

    def __post_init__(self):
        if not self.is_open:
            if self.open is not None or self.close is not None:
                raise ScheduleValidationError("A closed day cannot carry opening hours")
            return

        if self.open is None or self.close is None:
            raise ScheduleValidationError("An open day needs both open and close times")
        if self.open >= self.close:
            raise ScheduleValidationError(
                f"Open time {self.open} must be before close time {self.close}"
            )

    @classmethod
    def closed(cls) -> "DaySchedule":
        return cls(is_open=False)

    @classmethod
    def opening(cls, open: Union[str, WallClock], close: Union[str, WallClock]) -> "DaySchedule":
        return cls(is_open=True, open=WallClock.parse(open), close=WallClock.parse(close))

    @classmethod
    def from_record(cls, record: Mapping) -> "DaySchedule":
        """
        Build from a ``{isOpen, start, end}`` record.

        Stored records keep their last times even when the day is switched
        off, so those are dropped for closed days.
        """
        is_open = record.get("isOpen", record.get("is_open", False))
        if not is_open:
            return cls.closed()

        open_value = record.get("start", record.get("open"))
        close_value = record.get("end", record.get("close"))
        if open_value is None or close_value is None:
            raise ScheduleValidationError(f"Open day record is missing times: {dict(record)}")

        return cls.opening(open_value, close_value)

    def window(self) -> Optional[Interval]:
        """Return the opening hours as an interval, or None when closed."""
        if not self.is_open:
            return None
        return Interval(start=self.open, end=self.close)

    def intersect(self, other: "DaySchedule") -> "DaySchedule":
        """Hours when both schedules are open; closed if they never overlap."""
        own_window = self.window()
        other_window = other.window()
        if own_window is None or other_window is None:
            return DaySchedule.closed()

        shared = own_window.intersect(other_window)
        if shared is None:
            return DaySchedule.closed()

        return DaySchedule(is_open=True, open=shared.start, close=shared.end)

    def __str__(self) -> str:
        if not self.is_open:
            return "closed"
        return f"{self.open}-{self.close}"


@dataclass(frozen=True)
class WeeklySchedule:
    """
    Seven day schedules owned by a professional, a company or a service.

    A weekday missing from ``days`` reads as closed. Service schedules are
    derived from their owner's with ``with_overrides`` so they only list the
    days where they differ.
    """
    days: Mapping[Weekday, DaySchedule] = field(default_factory=dict)

    def day(self, weekday: Union[Weekday, str]) -> DaySchedule:
        return self.days.get(Weekday.from_name(weekday), DaySchedule.closed())

    def for_date(self, target: date) -> DaySchedule:
        return self.day(Weekday.of(target))

    def with_overrides(self, overrides: Mapping[Union[Weekday, str], DaySchedule]) -> "WeeklySchedule":
        """Derive a schedule that defaults to this one and diverges on the given days."""
        days = dict(self.days)
        for weekday, schedule in overrides.items():
            days[Weekday.from_name(weekday)] = schedule
        return WeeklySchedule(days=days)

    @classmethod
    def from_record(cls, record: Mapping) -> "WeeklySchedule":
        """Build from a mapping of lowercase weekday names to day records."""
        days: Dict[Weekday, DaySchedule] = {}
        for name, day_record in record.items():
            value = day_record if isinstance(day_record, DaySchedule) else DaySchedule.from_record(day_record)
            days[Weekday.from_name(name)] = value
        return cls(days=days)

    @classmethod
    def business_default(cls) -> "WeeklySchedule":
        """Monday to Friday 07:00-18:00, weekends closed."""
        weekdays = {
            day: DaySchedule.opening("07:00", "18:00")
            for day in Weekday
            if day < Weekday.SATURDAY
        }
        return cls(days=weekdays)


@dataclass(frozen=True)
class ServiceAvailabilityPolicy:
    """
    A service's fixed duration plus its optional own weekly schedule.

    Without a schedule the service follows its owner's working hours.
    """
    service_id: str
    duration_minutes: int
    schedule: Optional[WeeklySchedule] = None
    name: str = ""

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise ScheduleValidationError(
                f"Service {self.service_id} needs a positive duration, got {self.duration_minutes}"
            )

    def display_name(self) -> str:
        return self.name or self.service_id


class UnavailableReason(str, Enum):
    """Why a date offers no bookable slot."""
    DAY_CLOSED = "DAY_CLOSED"
    SERVICE_NOT_OFFERED_THIS_DAY = "SERVICE_NOT_OFFERED_THIS_DAY"
    NO_FITTING_WINDOW = "NO_FITTING_WINDOW"
    ALL_SLOTS_TAKEN = "ALL_SLOTS_TAKEN"


REASON_MESSAGES: Dict[UnavailableReason, str] = {
    UnavailableReason.DAY_CLOSED: "Closed on this day.",
    UnavailableReason.SERVICE_NOT_OFFERED_THIS_DAY: "This service is not offered on this day.",
    UnavailableReason.NO_FITTING_WINDOW: "The service is longer than the opening hours on this day.",
    UnavailableReason.ALL_SLOTS_TAKEN: "All times on this day are already booked.",
}


@dataclass(frozen=True)
class SlotGrid:
    """
    Candidate start times for one date before occupancy is applied.

    ``reason`` tags an empty grid with why nothing could be generated.
    """
    starts: Tuple[WallClock, ...]
    duration_minutes: int
    reason: Optional[UnavailableReason] = None

    def __iter__(self) -> Iterator[WallClock]:
        return iter(self.starts)

    def __len__(self) -> int:
        return len(self.starts)

    def intervals(self) -> List[Interval]:
        return [Interval.starting_at(start, self.duration_minutes) for start in self.starts]


@dataclass(frozen=True)
class AvailabilityQuery:
    """
    What the caller wants to book.

    ``exempt_interval`` is set only while rescheduling: the interval the
    moved appointment currently holds.
    """
    professional_id: str
    date: date
    service_id: Optional[str] = None
    exempt_interval: Optional[Interval] = None


@dataclass(frozen=True)
class AvailabilityResult:
    """
    Bookable start times for one date and service.

    Invariant: ``slots`` is empty if and only if ``unavailable_reason`` is set.
    """
    slots: Tuple[WallClock, ...]
    unavailable_reason: Optional[UnavailableReason] = None

    def __post_init__(self):
        if bool(self.slots) == (self.unavailable_reason is not None):
            raise ScheduleValidationError(
                "A result must either list slots or give an unavailable reason, not both"
            )

    @classmethod
    def available(cls, slots: Tuple[WallClock, ...]) -> "AvailabilityResult":
        return cls(slots=tuple(slots))

    @classmethod
    def unavailable(cls, reason: UnavailableReason) -> "AvailabilityResult":
        return cls(slots=(), unavailable_reason=reason)

    @property
    def is_available(self) -> bool:
        return bool(self.slots)

    @property
    def message(self) -> Optional[str]:
        """Human-readable explanation, or None when slots exist."""
        if self.unavailable_reason is None:
            return None
        return REASON_MESSAGES[self.unavailable_reason]

    def slot_labels(self) -> List[str]:
        return [str(slot) for slot in self.slots]

    def __contains__(self, item: object) -> bool:
        if isinstance(item, (str, time)):
            item = WallClock.parse(item)
        return item in self.slots
