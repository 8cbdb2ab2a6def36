"""
Tests for the multi-service aggregator.
"""

import pendulum

from availability_engine.domain.aggregator import MultiServiceAggregator
from availability_engine.domain.models import (
    DaySchedule,
    Interval,
    ServiceAvailabilityPolicy,
    UnavailableReason,
    WallClock,
    Weekday,
    WeeklySchedule,
)

MONDAY = pendulum.date(2024, 11, 25)

OWNER = WeeklySchedule(days={Weekday.MONDAY: DaySchedule.opening("09:00", "12:00")})

SERVICES = [
    ServiceAvailabilityPolicy(service_id="haircut", duration_minutes=60, name="Haircut"),
    ServiceAvailabilityPolicy(service_id="beard", duration_minutes=30),
    ServiceAvailabilityPolicy(
        service_id="colour",
        duration_minutes=90,
        schedule=WeeklySchedule(days={Weekday.MONDAY: DaySchedule.closed()}),
    ),
]


def _aggregate(occupied=(), exempt=None):
    return MultiServiceAggregator().aggregate(
        "prof-1",
        MONDAY,
        SERVICES,
        schedule=OWNER,
        occupied=list(occupied),
        exempt_interval=exempt,
    )


class TestMultiServiceAggregator:
    """Tests for MultiServiceAggregator."""

    def test_union_of_service_slots(self):
        """Test that the union is the sorted deduplication of all service slots."""
        aggregated = _aggregate()

        assert aggregated.per_service["haircut"].slot_labels() == ["09:00", "10:00", "11:00"]
        assert aggregated.per_service["beard"].slot_labels() == [
            "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
        ]

        concatenated = [slot for result in aggregated.per_service.values() for slot in result.slots]
        assert list(aggregated.union_slots) == sorted(set(concatenated))

    def test_each_service_keeps_its_own_reason(self):
        """Test that per-service results are resolved independently."""
        aggregated = _aggregate()

        assert aggregated.per_service["colour"].unavailable_reason == (
            UnavailableReason.SERVICE_NOT_OFFERED_THIS_DAY
        )
        assert aggregated.is_available

    def test_services_available_at_exact_time(self):
        """Test narrowing a picked time down to the services starting then."""
        aggregated = _aggregate()

        assert set(aggregated.services_available_at("10:00")) == {"haircut", "beard"}
        assert set(aggregated.services_available_at(WallClock.of(10, 30))) == {"beard"}

    def test_no_nearest_match(self):
        """Test that a time between slots matches no service."""
        assert _aggregate().services_available_at("10:15") == {}

    def test_shared_occupancy_snapshot(self):
        """Test that one occupancy list applies to every service."""
        aggregated = _aggregate(occupied=[Interval.between("10:00", "10:30")])

        assert "10:00" not in aggregated.per_service["haircut"]
        assert "10:00" not in aggregated.per_service["beard"]
        assert "10:30" in aggregated.per_service["beard"]
        assert WallClock.of(10) not in aggregated.union_slots

    def test_exemption_applies_to_every_service(self):
        """Test that a rescheduled appointment frees its time for all services."""
        booked = Interval.between("10:00", "11:00")

        aggregated = _aggregate(occupied=[booked], exempt=booked)

        assert aggregated == _aggregate()

    def test_no_services(self):
        """Test that a professional without services offers nothing."""
        aggregated = MultiServiceAggregator().aggregate(
            "prof-1", MONDAY, [], schedule=OWNER, occupied=[],
        )

        assert aggregated.union_slots == ()
        assert aggregated.per_service == {}
        assert not aggregated.is_available
