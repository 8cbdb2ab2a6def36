"""
Tests for duration normalization and formatting.
"""

import logging

import pytest

from availability_engine.domain.duration import (
    DurationNormalizer,
    format_duration,
    normalize_duration,
)
from availability_engine.domain.exceptions import DurationParseError


class TestDurationNormalizer:
    """Tests for DurationNormalizer."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (45, 45),
            (90.0, 90),
            ("45", 45),
            (" 45 ", 45),
            ("90min", 90),
            ("30 min", 30),
            ("2h", 120),
            ("1h30min", 90),
            ("1h 30min", 90),
            ("1H30", 90),
            ("45 minutes", 45),
            ("45 minutos", 45),
            ("2 horas", 120),
            ("2 hours", 120),
            ("1 hora e 30 minutos", 90),
            ("1 hour and 15 minutes", 75),
        ],
    )
    def test_parses_known_forms(self, raw, expected):
        """Test the accepted numeric and string forms."""
        assert normalize_duration(raw) == expected

    @pytest.mark.parametrize("raw", [0, -15, 12.5])
    def test_invalid_numbers_are_caller_errors(self, raw):
        """Test that non-positive or fractional numbers are not silently corrected."""
        with pytest.raises(DurationParseError):
            normalize_duration(raw)

    @pytest.mark.parametrize("raw", ["", "soon", "0", "0h", None])
    def test_unparseable_input_uses_fallback(self, raw, caplog):
        """Test that unparseable input resolves to the fallback and is logged."""
        with caplog.at_level(logging.WARNING, logger="availability_engine.domain.duration"):
            assert normalize_duration(raw) == 30

        assert "fallback" in caplog.text

    def test_custom_fallback(self):
        """Test that the fallback policy is configurable."""
        assert DurationNormalizer(fallback_minutes=60).normalize("tbd") == 60

    def test_strict_mode_raises(self):
        """Test that a strict normalizer refuses to guess."""
        normalizer = DurationNormalizer(fallback_minutes=None)

        assert normalizer.is_strict
        assert normalizer.normalize("1h") == 60
        with pytest.raises(DurationParseError, match="Unparseable duration"):
            normalizer.normalize("tbd")

    def test_fallback_must_be_positive(self):
        """Test that a zero fallback is rejected up front."""
        with pytest.raises(ValueError):
            DurationNormalizer(fallback_minutes=0)

    def test_bool_is_rejected(self):
        """Test that booleans are not treated as numbers."""
        with pytest.raises(DurationParseError):
            normalize_duration(True)


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (90, "1h 30min"),
            (120, "2h"),
            (45, "45min"),
            ("90", "1h 30min"),
            ("1h 30min", "1h 30min"),
            ("45 min", "45 min"),
            (None, "N/A"),
            ("", "N/A"),
        ],
    )
    def test_format(self, raw, expected):
        """Test display rendering of raw durations."""
        assert format_duration(raw) == expected
