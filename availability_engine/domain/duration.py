"""
Service duration normalization and display formatting.

Durations reach the engine as integers or as free-form strings typed into
service editors ("45", "90min", "1h30min", "1h 30min"). Everything is
normalized to a positive number of minutes before slot generation.
"""

import logging
import re
from typing import Optional, Union

from .exceptions import DurationParseError

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_MINUTES = 30

RawDuration = Union[int, float, str, None]

_BARE_MINUTES = re.compile(r"\d+")
_MINUTES_ONLY = re.compile(r"(\d+)\s*(?:min[a-z]*|m)")
_HOURS_AND_MINUTES = re.compile(r"(\d+)\s*h[a-z]*\s*(?:(?:e|and)\s+)?(?:(\d+)\s*(?:min[a-z]*|m)?)?")


class DurationNormalizer:
    """
    Turns raw durations into positive minute counts.

    Numbers pass through unchanged but must be positive; a zero or negative
    number is a caller error. Strings that cannot be parsed resolve to
    ``fallback_minutes``, which is logged since it hides bad data. Passing
    ``fallback_minutes=None`` makes the normalizer strict: unparseable
    strings raise ``DurationParseError`` instead.
    """

    def __init__(self, fallback_minutes: Optional[int] = DEFAULT_FALLBACK_MINUTES):
        if fallback_minutes is not None and fallback_minutes <= 0:
            raise ValueError(f"fallback_minutes must be greater than zero, got {fallback_minutes}")
        self.fallback_minutes = fallback_minutes

    @property
    def is_strict(self) -> bool:
        return self.fallback_minutes is None

    def normalize(self, raw: RawDuration) -> int:
        """
        Normalize a duration to minutes.

        String forms are tried in order: bare minutes ("45"), minutes with a
        suffix or word ("90min", "45 minutos"), then hours with optional
        minutes ("2h", "2 horas", "1h30min", "1h 30min").

        Raises:
            DurationParseError: For non-positive numbers, or for unparseable
                strings when the normalizer is strict
        """
        if isinstance(raw, bool):
            raise DurationParseError(f"Duration must be a number or string, got {raw!r}")

        if isinstance(raw, (int, float)):
            return self._from_number(raw)

        if raw is None:
            return self._fall_back(raw)

        text = str(raw).strip().lower()
        minutes = self._parse_text(text)
        if minutes is None or minutes <= 0:
            return self._fall_back(raw)

        return minutes

    @staticmethod
    def _from_number(raw: Union[int, float]) -> int:
        if isinstance(raw, float) and not raw.is_integer():
            raise DurationParseError(f"Duration must be a whole number of minutes, got {raw}")
        if raw <= 0:
            raise DurationParseError(f"Duration must be greater than zero, got {raw}")
        return int(raw)

    @staticmethod
    def _parse_text(text: str) -> Optional[int]:
        if _BARE_MINUTES.fullmatch(text):
            return int(text)

        match = _MINUTES_ONLY.fullmatch(text)
        if match:
            return int(match.group(1))

        match = _HOURS_AND_MINUTES.fullmatch(text)
        if match:
            hours = int(match.group(1))
            minutes = int(match.group(2) or 0)
            return hours * 60 + minutes

        return None

    def _fall_back(self, raw: RawDuration) -> int:
        if self.fallback_minutes is None:
            raise DurationParseError(f"Unparseable duration: {raw!r}")

        logger.warning(
            "Unparseable duration %r, using fallback of %d minutes", raw, self.fallback_minutes
        )
        return self.fallback_minutes


_default_normalizer = DurationNormalizer()


def normalize_duration(raw: RawDuration, normalizer: Optional[DurationNormalizer] = None) -> int:
    """Normalize with the given normalizer, or the default 30-minute fallback policy."""
    return (normalizer or _default_normalizer).normalize(raw)


def format_minutes(minutes: int) -> str:
    """Render minutes as ``"1h 30min"``, ``"2h"`` or ``"45min"``."""
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f"{hours}h {mins}min"
    if hours:
        return f"{hours}h"
    return f"{mins}min"


def format_duration(raw: RawDuration) -> str:
    """
    Render a raw duration for display.

    Strings that already read as formatted (contain "h" or "min") are
    returned literally; bare numbers are formatted; empty input gives "N/A".
    """
    if raw is None or raw == "" or raw == 0:
        return "N/A"

    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return format_minutes(int(raw))

    text = str(raw).strip().lower()
    if "h" in text or "min" in text:
        return str(raw)

    if _BARE_MINUTES.fullmatch(text):
        return format_minutes(int(text))

    return str(raw)
