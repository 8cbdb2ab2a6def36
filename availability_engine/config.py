"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from datetime import time
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.duration import DEFAULT_FALLBACK_MINUTES, DurationNormalizer
from .domain.models import DaySchedule, WallClock, Weekday, WeeklySchedule


class DefaultsConfig(BaseModel):
    """Default settings for slot computation."""
    fallback_duration_minutes: int = DEFAULT_FALLBACK_MINUTES
    strict_durations: bool = False
    slot_duration_minutes: int = 30

    @field_validator("fallback_duration_minutes", "slot_duration_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations are positive."""
        if value <= 0:
            raise ValueError("durations must be greater than zero")
        return value

    def build_normalizer(self) -> DurationNormalizer:
        """Normalizer honouring the configured fallback policy."""
        if self.strict_durations:
            return DurationNormalizer(fallback_minutes=None)
        return DurationNormalizer(fallback_minutes=self.fallback_duration_minutes)


class DayHoursConfig(BaseModel):
    """Opening hours of one weekday."""
    is_open: bool = False
    open: Optional[str] = None
    close: Optional[str] = None

    @field_validator("open", "close", mode="before")
    @classmethod
    def parse_wall_clock(cls, value):
        """
        Normalize to ``HH:MM``.

        Accepts strings, ``datetime.time`` and YAML's base-60 reading of an
        unquoted 17:00. ``24:00`` is allowed as a closing time.
        """
        if isinstance(value, bool) or value is None:
            return value
        if isinstance(value, int):
            return str(WallClock(value))
        if isinstance(value, (str, time)):
            return str(WallClock.parse(value))
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DayHoursConfig":
        """Ensure an open day opens before it closes."""
        if not self.is_open:
            return self
        if self.open is None or self.close is None:
            raise ValueError("open days need both open and close")
        if WallClock.parse(self.close) <= WallClock.parse(self.open):
            raise ValueError("close must be later than open")
        return self

    def to_day_schedule(self) -> DaySchedule:
        if not self.is_open:
            return DaySchedule.closed()
        return DaySchedule.opening(self.open, self.close)


def _business_hours() -> Dict[str, DayHoursConfig]:
    return {
        day.key: DayHoursConfig(is_open=True, open="07:00", close="18:00")
        for day in Weekday
        if day < Weekday.SATURDAY
    }


class AppConfig(BaseModel):
    """Application configuration."""
    data_file: Path = Path("schedule.json")
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    working_hours: Dict[str, DayHoursConfig] = Field(default_factory=_business_hours)
    log_level: str = "WARNING"

    @field_validator("working_hours")
    @classmethod
    def validate_weekdays(cls, value: Dict[str, DayHoursConfig]) -> Dict[str, DayHoursConfig]:
        """Ensure working hours are keyed by weekday names."""
        valid = {day.key for day in Weekday}
        unknown = sorted(key for key in value if key.lower() not in valid)
        if unknown:
            raise ValueError(f"working_hours keys must be weekday names, got {unknown}")
        return {key.lower(): hours for key, hours in value.items()}

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Ensure the level is one the logging module knows."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    def default_schedule(self) -> WeeklySchedule:
        """Weekly hours used for owners that have none on record."""
        return WeeklySchedule(days={
            Weekday.from_name(name): hours.to_day_schedule()
            for name, hours in self.working_hours.items()
        })

    def resolve_data_file(self, config_path: Optional[Path] = None) -> Path:
        """Resolve ``data_file`` relative to the config file's directory."""
        if self.data_file.is_absolute() or config_path is None:
            return self.data_file
        return config_path.parent / self.data_file

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
