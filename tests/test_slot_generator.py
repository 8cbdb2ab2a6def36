"""
Tests for slot generator.
"""

import pytest

from availability_engine.domain.exceptions import ScheduleValidationError
from availability_engine.domain.models import DaySchedule, UnavailableReason
from availability_engine.domain.slot_generator import SlotGenerator


class TestSlotGenerator:
    """Tests for SlotGenerator."""

    def test_steps_by_duration_from_open(self):
        """Test that a 45 minute service only starts on 45 minute steps."""
        grid = SlotGenerator().generate(DaySchedule.opening("09:00", "18:00"), 45)

        assert [str(start) for start in grid] == [
            "09:00", "09:45", "10:30", "11:15", "12:00", "12:45",
            "13:30", "14:15", "15:00", "15:45", "16:30", "17:15",
        ]
        assert grid.reason is None

    def test_last_slot_ends_at_or_before_close(self):
        """Test that no slot runs past closing time."""
        day = DaySchedule.opening("08:30", "12:10")
        grid = SlotGenerator().generate(day, 50)

        assert [str(start) for start in grid] == ["08:30", "09:20", "10:10", "11:00"]
        for interval in grid.intervals():
            assert day.open <= interval.start
            assert interval.end <= day.close

    def test_closed_day(self):
        """Test that a closed day yields an empty grid tagged DAY_CLOSED."""
        grid = SlotGenerator().generate(DaySchedule.closed(), 30)

        assert len(grid) == 0
        assert grid.reason == UnavailableReason.DAY_CLOSED

    def test_duration_longer_than_window(self):
        """Test that a window too short for one slot is tagged NO_FITTING_WINDOW."""
        grid = SlotGenerator().generate(DaySchedule.opening("09:00", "10:00"), 90)

        assert len(grid) == 0
        assert grid.reason == UnavailableReason.NO_FITTING_WINDOW

    def test_day_closing_at_midnight(self):
        """Test that a slot may end exactly at 24:00."""
        grid = SlotGenerator().generate(DaySchedule.opening("22:00", "24:00"), 60)

        assert [str(start) for start in grid] == ["22:00", "23:00"]

    def test_non_positive_duration_raises(self):
        """Test that a zero duration is rejected."""
        with pytest.raises(ScheduleValidationError):
            SlotGenerator().generate(DaySchedule.opening("09:00", "10:00"), 0)
