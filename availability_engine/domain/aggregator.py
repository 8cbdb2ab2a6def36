"""
Availability across every service a professional offers on one date.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .availability_resolver import AvailabilityResolver
from .models import (
    AvailabilityQuery,
    AvailabilityResult,
    Interval,
    ServiceAvailabilityPolicy,
    WallClock,
    WeeklySchedule,
)


@dataclass(frozen=True)
class AggregatedAvailability:
    """
    Per-service results plus the union of their start times.

    ``union_slots`` answers "when is this professional doing something on
    this date"; ``services_available_at`` narrows a picked time back down to
    the services that can start exactly then.
    """
    union_slots: Tuple[WallClock, ...]
    per_service: Dict[str, AvailabilityResult]

    def services_available_at(self, start: Union[str, time, WallClock]) -> Dict[str, AvailabilityResult]:
        """Services whose slots contain ``start`` exactly (no nearest match)."""
        wanted = WallClock.parse(start)
        return {
            service_id: result
            for service_id, result in self.per_service.items()
            if wanted in result.slots
        }

    @property
    def is_available(self) -> bool:
        return bool(self.union_slots)

    def slot_labels(self) -> List[str]:
        return [str(slot) for slot in self.union_slots]


class MultiServiceAggregator:
    """
    Resolves every service independently against one occupancy snapshot.

    Each service brings its own duration and possibly its own weekly hours,
    so each gets its own grid before the start times are merged.
    """

    def __init__(self, resolver: Optional[AvailabilityResolver] = None):
        self.resolver = resolver or AvailabilityResolver()

    def aggregate(
        self,
        professional_id: str,
        target_date: date,
        services: Sequence[ServiceAvailabilityPolicy],
        schedule: WeeklySchedule,
        occupied: Sequence[Interval],
        exempt_interval: Optional[Interval] = None,
    ) -> AggregatedAvailability:
        """
        Resolve all services for a date and merge their start times.

        Args:
            professional_id: Owner of the services
            target_date: Date to inspect
            services: Duration and optional own hours per service
            schedule: Owner's weekly working hours
            occupied: Appointments and blocked periods on ``target_date``
            exempt_interval: Interval of an appointment being rescheduled

        Returns:
            AggregatedAvailability with a sorted, deduplicated union
        """
        per_service: Dict[str, AvailabilityResult] = {}

        for policy in services:
            query = AvailabilityQuery(
                professional_id=professional_id,
                date=target_date,
                service_id=policy.service_id,
                exempt_interval=exempt_interval,
            )
            per_service[policy.service_id] = self.resolver.resolve(
                query,
                schedule=schedule,
                duration=policy.duration_minutes,
                occupied=occupied,
                service_schedule=policy.schedule,
            )

        union = sorted({slot for result in per_service.values() for slot in result.slots})

        return AggregatedAvailability(union_slots=tuple(union), per_service=per_service)
