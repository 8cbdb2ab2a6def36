"""
Candidate slot grid generation for a single day.
"""

import logging
from typing import List

from .exceptions import ScheduleValidationError
from .models import DaySchedule, SlotGrid, UnavailableReason, WallClock

logger = logging.getLogger(__name__)


class SlotGenerator:
    """
    Builds the grid of candidate start times for one day.

    Slots start at the opening time and step forward by the service
    duration, so a 45 minute service on a 09:00-18:00 day is offered at
    09:00, 09:45, 10:30 and so on. A slot is kept only while
    ``start + duration`` still fits before closing.
    """

    def generate(self, schedule: DaySchedule, duration_minutes: int) -> SlotGrid:
        """
        Generate the candidate grid.

        Args:
            schedule: Opening hours of the day
            duration_minutes: Normalized service duration

        Returns:
            SlotGrid, tagged DAY_CLOSED for closed days and NO_FITTING_WINDOW
            when the duration is longer than the opening hours
        """
        if duration_minutes <= 0:
            raise ScheduleValidationError(
                f"Duration must be greater than zero, got {duration_minutes}"
            )

        if not schedule.is_open:
            return SlotGrid(starts=(), duration_minutes=duration_minutes, reason=UnavailableReason.DAY_CLOSED)

        starts: List[WallClock] = []
        cursor = schedule.open.minutes
        close = schedule.close.minutes

        while cursor + duration_minutes <= close:
            starts.append(WallClock(cursor))
            cursor += duration_minutes

        if not starts:
            logger.debug(
                "A %d minute service does not fit into %s", duration_minutes, schedule
            )
            return SlotGrid(
                starts=(),
                duration_minutes=duration_minutes,
                reason=UnavailableReason.NO_FITTING_WINDOW,
            )

        return SlotGrid(starts=tuple(starts), duration_minutes=duration_minutes)
