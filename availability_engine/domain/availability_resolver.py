"""
Core business logic for turning opening hours and occupancy into bookable slots.

Pure domain logic: the caller fetches schedules and appointments and passes
them in. Nothing here performs I/O or keeps state between calls.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .duration import DurationNormalizer, RawDuration
from .models import (
    AvailabilityQuery,
    AvailabilityResult,
    DaySchedule,
    Interval,
    SlotGrid,
    UnavailableReason,
    WallClock,
    Weekday,
    WeeklySchedule,
)
from .slot_generator import SlotGenerator

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """
    Resolves the bookable start times of one service on one date.

    Algorithm:
    1. Pick the day schedule: the service's own hours nested inside the
       owner's, or the owner's hours when the service has none
    2. Generate the candidate grid in duration-sized steps
    3. Drop occupied intervals covered by the reschedule exemption
    4. Remove every candidate whose ``[t, t + duration)`` overlaps what is left
    5. Report why nothing is bookable when the list ends up empty
    """

    def __init__(
        self,
        slot_generator: Optional[SlotGenerator] = None,
        duration_normalizer: Optional[DurationNormalizer] = None,
    ):
        self.slot_generator = slot_generator or SlotGenerator()
        self.duration_normalizer = duration_normalizer or DurationNormalizer()

    def resolve(
        self,
        query: AvailabilityQuery,
        schedule: WeeklySchedule,
        duration: RawDuration,
        occupied: Sequence[Interval],
        service_schedule: Optional[WeeklySchedule] = None,
    ) -> AvailabilityResult:
        """
        Compute the availability for a query.

        Args:
            query: Professional, date and optional reschedule exemption
            schedule: Owner's weekly working hours
            duration: Service duration, raw or already in minutes
            occupied: Appointments and blocked periods on the query date
            service_schedule: The service's own weekly hours, if it has any

        Returns:
            AvailabilityResult with ascending slots, or an unavailable reason
        """
        duration_minutes = self.duration_normalizer.normalize(duration)

        day, closed_reason = self.effective_day(query, schedule, service_schedule)
        if closed_reason is not None:
            return AvailabilityResult.unavailable(closed_reason)

        grid = self.slot_generator.generate(day, duration_minutes)
        if grid.reason is not None:
            return AvailabilityResult.unavailable(grid.reason)

        blocking = self._apply_exemption(occupied, query.exempt_interval)
        slots = self._subtract_occupied(grid, blocking)

        if not slots:
            return AvailabilityResult.unavailable(UnavailableReason.ALL_SLOTS_TAKEN)

        logger.debug(
            "%d of %d slots free for %s on %s",
            len(slots), len(grid), query.professional_id, query.date,
        )
        return AvailabilityResult.available(tuple(slots))

    @staticmethod
    def effective_day(
        query: AvailabilityQuery,
        schedule: WeeklySchedule,
        service_schedule: Optional[WeeklySchedule] = None,
    ) -> Tuple[DaySchedule, Optional[UnavailableReason]]:
        """
        Resolve the opening hours that apply to the query date.

        A closed owner day wins over anything the service says. A service
        closure, or service hours that never meet the owner's, is reported
        separately so callers can tell the two apart.
        """
        owner_day = schedule.for_date(query.date)
        if not owner_day.is_open:
            return owner_day, UnavailableReason.DAY_CLOSED

        if service_schedule is None:
            return owner_day, None

        # Days the service leaves out follow the owner's hours.
        service_day = service_schedule.days.get(Weekday.of(query.date), owner_day)
        nested = service_day.intersect(owner_day)
        if not nested.is_open:
            return nested, UnavailableReason.SERVICE_NOT_OFFERED_THIS_DAY

        return nested, None

    @staticmethod
    def _apply_exemption(
        occupied: Sequence[Interval],
        exempt_interval: Optional[Interval],
    ) -> List[Interval]:
        """Ignore occupied intervals that lie wholly inside the exemption."""
        if exempt_interval is None:
            return list(occupied)

        return [
            interval for interval in occupied
            if not exempt_interval.contains(interval)
        ]

    @staticmethod
    def _subtract_occupied(grid: SlotGrid, occupied: Sequence[Interval]) -> List[WallClock]:
        free: List[WallClock] = []

        for candidate in grid.intervals():
            if not any(candidate.overlaps(busy) for busy in occupied):
                free.append(candidate.start)

        return free
