"""
Tests for the command line interface.
"""

from typer.testing import CliRunner

from availability_engine.cli.app import app

runner = CliRunner()


def _invoke(*args):
    return runner.invoke(app, list(args))


class TestCli:
    """Tests for the typer commands."""

    def test_slots_for_service(self, schedule_file):
        """Test that booked and blocked times are missing from the listing."""
        result = _invoke("slots", "prof-1", "2024-11-25", "--service", "haircut", "--data", str(schedule_file))

        assert result.exit_code == 0
        assert "09:45" in result.output
        assert "10:30" not in result.output
        assert "12:00" not in result.output

    def test_slots_reschedule(self, schedule_file):
        """Test that the moved appointment's own time is offered again."""
        result = _invoke(
            "slots", "prof-1", "2024-11-25", "-s", "haircut",
            "--reschedule", "10:30-11:15", "--data", str(schedule_file),
        )

        assert result.exit_code == 0
        assert "10:30" in result.output

    def test_slots_closed_day(self, schedule_file):
        """Test that a closed day prints the reason instead of a table."""
        result = _invoke("slots", "prof-1", "2024-11-24", "-s", "haircut", "--data", str(schedule_file))

        assert result.exit_code == 0
        assert "Closed on this day." in result.output

    def test_slots_unknown_service(self, schedule_file):
        """Test that an unknown service fails with exit code 1."""
        result = _invoke("slots", "prof-1", "2024-11-25", "-s", "massage", "--data", str(schedule_file))

        assert result.exit_code == 1
        assert "does not offer service" in result.output

    def test_agenda_at_time(self, schedule_file):
        """Test that picking a time lists the services starting then."""
        result = _invoke("agenda", "prof-1", "2024-11-26", "--at", "13:30", "--data", str(schedule_file))

        assert result.exit_code == 0
        assert "haircut" in result.output
        assert "beard" in result.output
        assert "colour" not in result.output

    def test_duration_command(self):
        """Test that durations are shown normalized and formatted."""
        result = _invoke("duration", "1h30min")

        assert result.exit_code == 0
        assert "90 minutes (1h 30min)" in result.output

    def test_duration_strict_failure(self):
        """Test that strict mode fails on unparseable input."""
        result = _invoke("duration", "soon", "--strict")

        assert result.exit_code == 1
