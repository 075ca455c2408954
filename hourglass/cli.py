"""Hourglass CLI -- a countdown timer for the terminal."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from hourglass import __version__, config, display, timer
from hourglass.duration import parse_duration
from hourglass.errors import InvalidDuration, TerminalError
from hourglass.models import ClockFormat, Switch, TimerOutcome, TimerSpec
from hourglass.terminal import TerminalSession

log = logging.getLogger(__name__)

DURATION_HELP = """The duration of the timer. Units: h (hours), m (minutes),
s (seconds), ms (milliseconds). Without a unit, seconds are used.
Examples: 50 (50 seconds), 45m (45 minutes), 1h30m (1 hour 30 minutes)."""

app = typer.Typer(
    name="hourglass",
    help="A countdown timer with a gradient progress bar. Press q or Esc to quit.",
    add_completion=False,
)


def _configure_logging(log_file: Optional[Path]) -> None:
    """Log to a file if asked; the alternate screen must stay clean otherwise."""
    if log_file is None:
        return
    logging.basicConfig(
        filename=str(log_file),
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hourglass {__version__}")
        raise typer.Exit()


@app.command()
def main(
    duration: str = typer.Argument(..., help=DURATION_HELP, show_default=False),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="A name for the timer."),
    notify: Optional[Switch] = typer.Option(
        None,
        "--notify",
        case_sensitive=False,
        help="Send a notification when the timer begins and ends.",
        show_default=False,
    ),
    clock_format: Optional[ClockFormat] = typer.Option(
        None,
        "--format",
        "-f",
        help="Clock used for the start time: 24h (23:59:59) or 12h (11:59:59 PM).",
        show_default=False,
    ),
    save_defaults: bool = typer.Option(
        False, "--save-defaults", help="Remember --name, --notify and --format for later runs."
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Write debug logs to this file.", dir_okay=False
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    """Run a countdown timer."""
    _configure_logging(log_file)

    try:
        total = parse_duration(duration)
    except InvalidDuration as e:
        display.print_error(f'Invalid duration "{e.token}": {e.reason}')
        raise typer.Exit(1)

    defaults = config.load_config()
    if name is not None:
        defaults.name = name
    if notify is not None:
        defaults.notify = notify is Switch.TRUE
    if clock_format is not None:
        defaults.clock_format = clock_format
    if save_defaults:
        path = config.save_config(defaults)
        log.info("Saved defaults to %s.", path)

    spec = TimerSpec(
        total_duration=total,
        name=defaults.name,
        notify=defaults.notify,
        clock_format=defaults.clock_format,
    )

    try:
        with TerminalSession() as session:
            outcome = timer.run_timer(
                spec, session, poll_interval=defaults.poll_interval_ms / 1000
            )
    except TerminalError as e:
        display.print_error(str(e))
        raise typer.Exit(1)
    except KeyboardInterrupt:
        outcome = TimerOutcome.CANCELLED

    if outcome is TimerOutcome.COMPLETED:
        display.print_success(f"{spec.title} is over!")
    else:
        display.print_warning(f"{spec.title} cancelled.")
