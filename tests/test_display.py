"""Tests for the progress widget and formatting helpers."""

from __future__ import annotations

import io
from datetime import datetime, timedelta

import pytest
from rich.color import Color
from rich.console import Console

from hourglass.display import (
    BAR_BACKGROUND,
    TimerView,
    bar_colors,
    filled_cells,
    format_remaining,
    format_started_at,
    gradient,
    gradient_index,
    render_bar,
)
from hourglass.models import ClockFormat


def _backgrounds(text) -> list:
    """Background color of every cell in a rendered bar."""
    cells = [None] * len(text.plain)
    for span in text.spans:
        for i in range(span.start, span.end):
            cells[i] = span.style.bgcolor
    return cells


class TestGradient:
    def test_length(self) -> None:
        assert len(gradient()) == 100

    def test_starts_at_start_color(self) -> None:
        assert gradient()[0] == Color.from_rgb(102, 63, 242)

    def test_last_step_approaches_end_color(self) -> None:
        assert gradient()[-1].get_truecolor() == (243, 64, 204)

    def test_cached(self) -> None:
        assert gradient() is gradient()


class TestGeometry:
    def test_scenario_half_of_fifty(self) -> None:
        colors = bar_colors(50, 50)
        table = gradient()
        assert len(colors) == 25
        assert colors[0] == table[0]
        assert colors[24] == table[48]

    def test_zero_width(self) -> None:
        assert filled_cells(0, 100) == 0
        assert bar_colors(0, 100) == []
        assert render_bar(0, 50).plain == ""

    def test_single_cell(self) -> None:
        assert bar_colors(1, 100) == [gradient()[0]]
        assert bar_colors(1, 99) == []

    def test_out_of_range_percent_is_clamped(self) -> None:
        assert filled_cells(40, 150) == 40
        assert filled_cells(40, -10) == 0

    @pytest.mark.parametrize("width", [1, 2, 3, 7, 50, 99, 100, 101, 333])
    def test_index_in_bounds(self, width: int) -> None:
        for percent in range(101):
            for cell in range(filled_cells(width, percent)):
                assert 0 <= gradient_index(cell, width, 100) < 100

    def test_ramp_is_spatial(self) -> None:
        """A cell keeps its color as the bar grows."""
        assert bar_colors(80, 30) == bar_colors(80, 90)[: len(bar_colors(80, 30))]

    def test_gradient_index_rejects_empty_row(self) -> None:
        with pytest.raises(ValueError):
            gradient_index(0, 0, 100)


class TestRenderBar:
    def test_width_and_label(self) -> None:
        bar = render_bar(20, 50)
        assert len(bar.plain) == 20
        assert bar.plain.endswith("50%")

    def test_backgrounds(self) -> None:
        cells = _backgrounds(render_bar(10, 50))
        assert cells[:5] == bar_colors(10, 50)
        assert all(bg == BAR_BACKGROUND for bg in cells[5:])

    def test_full_bar(self) -> None:
        cells = _backgrounds(render_bar(10, 100))
        assert BAR_BACKGROUND not in cells
        assert render_bar(10, 100).plain.endswith("100%")

    def test_label_clipped_when_narrow(self) -> None:
        bar = render_bar(2, 100)
        assert bar.plain == "0%"


class TestFormatRemaining:
    def test_sub_second(self) -> None:
        assert format_remaining(timedelta(seconds=0.37)) == "0.37s"

    def test_zero(self) -> None:
        assert format_remaining(timedelta(0)) == "0.00s"

    def test_never_negative(self) -> None:
        assert format_remaining(timedelta(seconds=-3)) == "0.00s"

    def test_threshold(self) -> None:
        assert format_remaining(timedelta(seconds=0.999)) == "1.00s"
        assert format_remaining(timedelta(seconds=1)) == "00h:00m:01s"

    def test_clock_style(self) -> None:
        assert format_remaining(timedelta(hours=1, minutes=2, seconds=3.9)) == "01h:02m:03s"

    def test_hours_unbounded(self) -> None:
        assert format_remaining(timedelta(days=1, hours=1, seconds=1)) == "25h:00m:01s"


class TestFormatStartedAt:
    def test_24h(self) -> None:
        assert format_started_at(datetime(2024, 1, 1, 23, 59, 58), ClockFormat.H24) == "23:59:58"

    def test_12h(self) -> None:
        formatted = format_started_at(datetime(2024, 1, 1, 23, 59, 58), ClockFormat.H12)
        assert formatted.startswith("11:59:58")
        assert formatted.endswith("PM")


class TestTimerView:
    def _render(self, view: TimerView, width: int = 40) -> list[str]:
        buf = io.StringIO()
        Console(file=buf, width=width, color_system=None).print(view)
        return buf.getvalue().splitlines()

    def test_rows(self) -> None:
        view = TimerView(
            title="Tea",
            percent=25,
            remaining=timedelta(minutes=3),
            started_at=datetime(2024, 1, 1, 9, 5, 0),
        )
        lines = self._render(view)
        assert lines[0].strip() == "Tea"
        assert lines[1].strip() == "Started at: 09:05:00"
        assert lines[2].strip() == "Time left: 00h:03m:00s"
        assert lines[3].rstrip().endswith("25%")
        assert len(lines[3]) == 40

    def test_12h_clock(self) -> None:
        view = TimerView(
            title="Timer",
            percent=0,
            remaining=timedelta(seconds=0.5),
            started_at=datetime(2024, 1, 1, 13, 0, 0),
            clock_format=ClockFormat.H12,
        )
        lines = self._render(view)
        assert "01:00:00 PM" in lines[1]
        assert "0.50s" in lines[2]
