"""
Main CLI application using Typer.
"""

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Annotated, Tuple

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..adapters.json_schedule_store import JsonScheduleStore
from ..domain.availability_resolver import AvailabilityResolver
from ..domain.duration import DurationNormalizer, format_duration
from ..domain.exceptions import AvailabilityError
from ..domain.models import AvailabilityQuery, Interval, WallClock
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="availability-engine",
    help="Compute bookable appointment times from working hours and occupancy",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DataOption = Annotated[Optional[Path], typer.Option("--data", "-d", help="Schedule JSON file. Overrides data_file from the config.")]
RescheduleOption = Annotated[Optional[str], typer.Option("--reschedule", "-r", help="Interval of the appointment being moved (HH:MM-HH:MM).")]


def _load_config(config_file: Optional[Path]) -> Tuple[AppConfig, Optional[Path]]:
    """Load the config file, or fall back to defaults when none exists."""
    config_path = config_file or get_default_config_path()
    if config_file is None and not config_path.exists():
        return AppConfig(), None
    return AppConfig.load_from_yaml(config_path), config_path


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_service(config: AppConfig, config_path: Optional[Path], data_file: Optional[Path]) -> AvailabilityService:
    normalizer = config.defaults.build_normalizer()
    store = JsonScheduleStore(
        data_file=data_file or config.resolve_data_file(config_path),
        default_schedule=config.default_schedule(),
        duration_normalizer=normalizer,
    )
    return AvailabilityService(
        schedule_source=store,
        resolver=AvailabilityResolver(duration_normalizer=normalizer),
        slot_duration_minutes=config.defaults.slot_duration_minutes,
    )


def _parse_date(value: str) -> date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        raise typer.BadParameter(f"Invalid date {value!r}, expected YYYY-MM-DD: {e}")


def _parse_interval(value: Optional[str]) -> Optional[Interval]:
    if value is None:
        return None
    try:
        return Interval.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


def _print_slots(labels, title: str) -> None:
    table = Table(title=title, show_header=False)
    for start in range(0, len(labels), 6):
        table.add_row(*labels[start:start + 6])
    console.print()
    console.print(table)
    console.print()


@app.command()
def slots(
    professional: Annotated[str, typer.Argument(help="Professional or company id")],
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    service: Annotated[Optional[str], typer.Option("--service", "-s", help="Service id. Without it the generic slot duration is used.")] = None,
    reschedule: RescheduleOption = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Show bookable start times for one service on one date.

    Examples:

        availability-engine slots prof-1 2024-11-25 --service haircut

        # Moving the 10:30 appointment: its own time shows as free
        availability-engine slots prof-1 2024-11-25 -s haircut -r 10:30-11:15
    """
    target_date = _parse_date(day)
    exempt = _parse_interval(reschedule)

    try:
        config, config_path = _load_config(config_file)
        _configure_logging(config.log_level)
        availability = _build_service(config, config_path, data_file)

        query = AvailabilityQuery(
            professional_id=professional,
            date=target_date,
            service_id=service,
            exempt_interval=exempt,
        )
        result = asyncio.run(availability.find_slots(query))

    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not result.is_available:
        console.print(f"[yellow]⚠ {result.message}[/yellow]")
        return

    title = f"{len(result.slots)} bookable time(s) on {target_date.isoformat()}"
    _print_slots(result.slot_labels(), title)


@app.command()
def agenda(
    professional: Annotated[str, typer.Argument(help="Professional or company id")],
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    at: Annotated[Optional[str], typer.Option("--at", help="Show the services that can start at this time (HH:MM).")] = None,
    reschedule: RescheduleOption = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Show the times a professional offers anything on a date, across all services.
    """
    target_date = _parse_date(day)
    exempt = _parse_interval(reschedule)

    try:
        picked = WallClock.parse(at) if at else None
        config, config_path = _load_config(config_file)
        _configure_logging(config.log_level)
        availability = _build_service(config, config_path, data_file)

        aggregated = asyncio.run(availability.find_agenda(
            professional_id=professional,
            target_date=target_date,
            exempt_interval=exempt,
        ))

    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if picked is None:
        if not aggregated.is_available:
            console.print("[yellow]⚠ No service can be booked on this date.[/yellow]")
            return
        _print_slots(aggregated.slot_labels(), f"Times offered on {target_date.isoformat()}")
        return

    matching = aggregated.services_available_at(picked)
    if not matching:
        console.print(f"[yellow]⚠ No service starts at {picked}.[/yellow]")
        return

    table = Table(
        title=f"Services available at {picked}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Service", style="bold yellow")
    table.add_column("Bookable times", style="dim")
    for service_id, result in matching.items():
        table.add_row(service_id, ", ".join(result.slot_labels()))

    console.print()
    console.print(table)
    console.print()


@app.command()
def duration(
    raw: Annotated[str, typer.Argument(help="Duration as entered, e.g. '45', '90min', '1h30min'")],
    strict: Annotated[bool, typer.Option("--strict", help="Fail instead of using the fallback duration.")] = False,
    fallback: Annotated[int, typer.Option("--fallback", help="Minutes used for unparseable input.")] = 30,
):
    """
    Normalize a duration to minutes and show its display form.
    """
    try:
        normalizer = DurationNormalizer(fallback_minutes=None if strict else fallback)
        minutes = normalizer.normalize(raw)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"{minutes} minutes ({format_duration(minutes)})")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]availability-engine[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
