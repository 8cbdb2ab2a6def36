"""
Schedule source backed by a JSON export of the marketplace records.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pendulum

from ..domain.duration import DurationNormalizer
from ..domain.exceptions import (
    ProfessionalNotFoundError,
    ScheduleSourceError,
)
from ..domain.models import Interval, ServiceAvailabilityPolicy, WallClock, WeeklySchedule

logger = logging.getLogger(__name__)

CANCELLED_STATUSES = {"cancelled", "canceled"}


class JsonScheduleStore:
    """
    Reads working hours, services and occupancy from one JSON document.

    Expected shape::

        {
          "professionals": [{"id", "workingHours", "services": [...]}],
          "appointments": [{"professionalId", "date", "startTime", "endTime", "status"}],
          "blockedPeriods": [{"professionalId", "date", "start", "end"}]
        }

    Records keep the camelCase keys of the booking API. Malformed
    appointments or blocked periods are skipped with a warning so one bad row
    does not hide a professional's whole day.
    """

    def __init__(
        self,
        data_file: Path,
        default_schedule: Optional[WeeklySchedule] = None,
        duration_normalizer: Optional[DurationNormalizer] = None,
    ):
        """
        Initialize the store.

        Args:
            data_file: Path to the JSON document
            default_schedule: Hours for professionals without ``workingHours``
            duration_normalizer: Policy used for service durations
        """
        self.data_file = data_file
        self.default_schedule = default_schedule or WeeklySchedule.business_default()
        self.duration_normalizer = duration_normalizer or DurationNormalizer()
        self._load_schedule_data()

    def _load_schedule_data(self) -> None:
        if not self.data_file.exists():
            raise ScheduleSourceError(f"Schedule data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ScheduleSourceError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise ScheduleSourceError("Schedule data must contain a mapping at the root level.")

        self.professionals: Dict[str, Dict[str, Any]] = {
            str(record["id"]): record
            for record in data.get("professionals", [])
            if isinstance(record, dict) and "id" in record
        }
        self.appointments: List[Dict[str, Any]] = data.get("appointments", [])
        self.blocked_periods: List[Dict[str, Any]] = data.get("blockedPeriods", [])

    def _professional(self, professional_id: str) -> Dict[str, Any]:
        record = self.professionals.get(str(professional_id))
        if record is None:
            raise ProfessionalNotFoundError(f"Unknown professional: {professional_id}")
        return record

    async def get_working_hours(self, professional_id: str) -> WeeklySchedule:
        """Weekly hours on record, or the configured default calendar."""
        record = self._professional(professional_id).get("workingHours")
        if not record:
            return self.default_schedule

        try:
            return WeeklySchedule.from_record(record)
        except ValueError as exc:
            raise ScheduleSourceError(
                f"Invalid working hours for professional {professional_id}: {exc}"
            ) from exc

    async def get_services(self, professional_id: str) -> List[ServiceAvailabilityPolicy]:
        """
        Duration and optional own hours of every service the professional offers.

        A service schedule only lists the days where it differs; the other
        days follow the professional's working hours.
        """
        services = self._professional(professional_id).get("services", [])
        owner_schedule = await self.get_working_hours(professional_id)
        policies: List[ServiceAvailabilityPolicy] = []

        for service in services:
            if not isinstance(service, dict):
                logger.warning("Skipping invalid service record %r", service)
                continue
            try:
                schedule_record = service.get("schedule")
                schedule = None
                if schedule_record:
                    own_days = WeeklySchedule.from_record(schedule_record).days
                    schedule = owner_schedule.with_overrides(own_days)
                policies.append(ServiceAvailabilityPolicy(
                    service_id=str(service["id"]),
                    duration_minutes=self.duration_normalizer.normalize(service.get("duration")),
                    schedule=schedule,
                    name=service.get("name", ""),
                ))
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping invalid service record %r: %s", service, exc)

        return policies

    async def get_occupancy(self, professional_id: str, target_date: date) -> List[Interval]:
        """
        Intervals consumed on ``target_date`` by live appointments and blocked periods.

        Cancelled appointments do not occupy time. An appointment without an
        end time lasts as long as its service.
        """
        self._professional(professional_id)
        durations = await self._service_durations(professional_id)
        occupied: List[Interval] = []

        for appointment in self._records_on(self.appointments, professional_id, target_date):
            if str(appointment.get("status", "")).lower() in CANCELLED_STATUSES:
                continue
            try:
                occupied.append(self._appointment_interval(appointment, durations))
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping invalid appointment %r: %s", appointment, exc)

        for period in self._records_on(self.blocked_periods, professional_id, target_date):
            try:
                occupied.append(Interval.between(
                    period.get("start", "00:00"),
                    period.get("end", "24:00"),
                ))
            except ValueError as exc:
                logger.warning("Skipping invalid blocked period %r: %s", period, exc)

        return sorted(occupied, key=lambda interval: interval.start)

    async def _service_durations(self, professional_id: str) -> Dict[str, int]:
        return {
            policy.service_id: policy.duration_minutes
            for policy in await self.get_services(professional_id)
        }

    def _appointment_interval(self, appointment: Mapping[str, Any], durations: Mapping[str, int]) -> Interval:
        start = WallClock.parse(appointment["startTime"])

        if appointment.get("endTime"):
            return Interval(start=start, end=WallClock.parse(appointment["endTime"]))

        if appointment.get("duration") is not None:
            minutes = self.duration_normalizer.normalize(appointment["duration"])
        else:
            minutes = durations.get(
                str(appointment.get("serviceId")),
                self.duration_normalizer.normalize(None),
            )
        return Interval.starting_at(start, minutes)

    @staticmethod
    def _records_on(records: List[Dict[str, Any]], professional_id: str, target_date: date):
        for record in records:
            if not isinstance(record, dict):
                logger.warning("Skipping invalid record %r", record)
                continue
            if str(record.get("professionalId")) != str(professional_id):
                continue
            try:
                record_date = pendulum.parse(str(record["date"])).date()
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping record with invalid date %r: %s", record, exc)
                continue
            if record_date == target_date:
                yield record
