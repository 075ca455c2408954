"""Rich terminal formatting helpers and the countdown widget."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import lru_cache

from rich.color import Color
from rich.console import Console, ConsoleOptions, RenderResult
from rich.markup import escape
from rich.style import Style
from rich.text import Text

from hourglass.models import ClockFormat

console = Console()
err_console = Console(stderr=True)

GRADIENT_STEPS = 100
GRADIENT_START: tuple[int, int, int] = (102, 63, 242)
GRADIENT_END: tuple[int, int, int] = (245, 65, 204)
BAR_BACKGROUND = Color.from_rgb(45, 45, 45)

_CLOCK_PATTERN: dict[ClockFormat, str] = {
    ClockFormat.H24: "%H:%M:%S",
    ClockFormat.H12: "%I:%M:%S %p",
}


# ---------------------------------------------------------------------------
# Progress bar
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def gradient(steps: int = GRADIENT_STEPS) -> tuple[Color, ...]:
    """Return ``steps`` colors interpolated from GRADIENT_START to GRADIENT_END."""
    colors: list[Color] = []
    for i in range(steps):
        t = i / steps
        r, g, b = (
            int(start + (end - start) * t)
            for start, end in zip(GRADIENT_START, GRADIENT_END)
        )
        colors.append(Color.from_rgb(r, g, b))
    return tuple(colors)


def filled_cells(width: int, percent: int) -> int:
    """Number of bar cells covered at ``percent`` on a row ``width`` cells wide."""
    width = max(width, 0)
    percent = min(max(percent, 0), 100)
    return percent * width // 100


def gradient_index(cell: int, width: int, length: int) -> int:
    """Map a cell position proportionally onto a gradient of ``length`` colors."""
    if width <= 0 or length <= 0:
        raise ValueError("width and length must be positive")
    cell = min(max(cell, 0), width - 1)
    return cell * length // width


def bar_colors(width: int, percent: int) -> list[Color]:
    """Colors of the filled cells, left to right.

    The ramp is tied to position: a given cell always gets the same color,
    and a higher percent just reveals more of it.
    """
    table = gradient()
    return [
        table[gradient_index(cell, width, len(table))]
        for cell in range(filled_cells(width, percent))
    ]


def render_bar(width: int, percent: int) -> Text:
    """Paint one bar row: neutral background, gradient fill, percent label on the right."""
    width = max(width, 0)
    percent = min(max(percent, 0), 100)
    if width == 0:
        return Text()

    chars = [" "] * width
    label = f"{percent}%"[-width:]
    chars[width - len(label):] = label

    backgrounds = bar_colors(width, percent)
    backgrounds += [BAR_BACKGROUND] * (width - len(backgrounds))

    text = Text(no_wrap=True, overflow="crop")
    for char, bg in zip(chars, backgrounds):
        text.append(char, style=Style(bgcolor=bg))
    return text


# ---------------------------------------------------------------------------
# Countdown widget
# ---------------------------------------------------------------------------


def format_remaining(remaining: timedelta) -> str:
    """``0.37s`` under a second, ``HHh:MMm:SSs`` otherwise (hours unbounded)."""
    seconds = max(remaining.total_seconds(), 0.0)
    if seconds < 1:
        return f"{seconds:.2f}s"
    whole = int(seconds)
    return f"{whole // 3600:02d}h:{whole // 60 % 60:02d}m:{whole % 60:02d}s"


def format_started_at(started_at: datetime, clock_format: ClockFormat) -> str:
    return started_at.strftime(_CLOCK_PATTERN[clock_format])


@dataclass(frozen=True)
class TimerView:
    """One frame of the countdown, rendered to whatever width the console offers."""

    title: str
    percent: int
    remaining: timedelta
    started_at: datetime
    clock_format: ClockFormat = ClockFormat.H24

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        yield Text(self.title, style="bold", no_wrap=True, overflow="crop")
        yield Text(
            f"Started at: {format_started_at(self.started_at, self.clock_format)}",
            no_wrap=True,
            overflow="crop",
        )
        yield Text(
            f"Time left: {format_remaining(self.remaining)}",
            no_wrap=True,
            overflow="crop",
        )
        yield render_bar(options.max_width, self.percent)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]{escape(message)}[/blue]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{escape(message)}[/yellow]")


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[bold red]{escape(message)}[/bold red]")
