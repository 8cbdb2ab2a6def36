"""
Application services for finding bookable appointment times.

The service fetches working hours, service policies and occupancy through a
schedule source adapter and delegates the computation to the domain-level
``AvailabilityResolver`` and ``MultiServiceAggregator``. Every input is
fetched before the engine runs, so the engine never works on partial data.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Protocol

from ..domain.aggregator import AggregatedAvailability, MultiServiceAggregator
from ..domain.availability_resolver import AvailabilityResolver
from ..domain.exceptions import ServiceNotFoundError
from ..domain.models import (
    AvailabilityQuery,
    AvailabilityResult,
    Interval,
    ServiceAvailabilityPolicy,
    WeeklySchedule,
)

logger = logging.getLogger(__name__)


class ScheduleSourceProtocol(Protocol):
    """Protocol describing the schedule data the service needs."""

    async def get_working_hours(self, professional_id: str) -> WeeklySchedule:
        """Return the owner's weekly working hours."""

    async def get_services(self, professional_id: str) -> List[ServiceAvailabilityPolicy]:
        """Return the duration and optional own hours of each service."""

    async def get_occupancy(self, professional_id: str, target_date: date) -> List[Interval]:
        """Return non-cancelled appointments and blocked periods on a date."""


class AvailabilityService:
    """
    Orchestrates schedule retrieval and availability resolution.

    Dependency inversion toward a protocol lets the JSON store, an API
    client or a test stub provide the data.
    """

    def __init__(
        self,
        schedule_source: ScheduleSourceProtocol,
        resolver: Optional[AvailabilityResolver] = None,
        slot_duration_minutes: int = 30,
    ) -> None:
        self._schedule_source = schedule_source
        self._resolver = resolver or AvailabilityResolver()
        self._aggregator = MultiServiceAggregator(resolver=self._resolver)
        self._slot_duration_minutes = slot_duration_minutes

    async def find_slots(self, query: AvailabilityQuery) -> AvailabilityResult:
        """
        Bookable start times for the queried service.

        Without a service id the generic slot duration is used, which is how
        a company calendar is browsed before a service is picked.

        Raises:
            ServiceNotFoundError: If the professional does not offer the service
        """
        schedule = await self._schedule_source.get_working_hours(query.professional_id)
        duration = self._slot_duration_minutes
        service_schedule = None

        if query.service_id is not None:
            policy = await self._find_policy(query.professional_id, query.service_id)
            duration = policy.duration_minutes
            service_schedule = policy.schedule

        occupied = await self._schedule_source.get_occupancy(query.professional_id, query.date)

        logger.debug(
            "Resolving %s/%s on %s with %d occupied intervals",
            query.professional_id, query.service_id, query.date, len(occupied),
        )
        return self._resolver.resolve(
            query,
            schedule=schedule,
            duration=duration,
            occupied=occupied,
            service_schedule=service_schedule,
        )

    async def find_agenda(
        self,
        *,
        professional_id: str,
        target_date: date,
        exempt_interval: Optional[Interval] = None,
    ) -> AggregatedAvailability:
        """Availability of every service on a date, resolved against one occupancy snapshot."""
        schedule = await self._schedule_source.get_working_hours(professional_id)
        services = await self._schedule_source.get_services(professional_id)
        occupied = await self._schedule_source.get_occupancy(professional_id, target_date)

        return self._aggregator.aggregate(
            professional_id,
            target_date,
            services,
            schedule=schedule,
            occupied=occupied,
            exempt_interval=exempt_interval,
        )

    async def _find_policy(self, professional_id: str, service_id: str) -> ServiceAvailabilityPolicy:
        for policy in await self._schedule_source.get_services(professional_id):
            if policy.service_id == service_id:
                return policy

        raise ServiceNotFoundError(
            f"Professional {professional_id} does not offer service {service_id}"
        )
