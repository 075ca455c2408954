"""Pydantic models — single source of truth for all data types."""

from __future__ import annotations

import enum
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TITLE = "Timer"


class ClockFormat(str, enum.Enum):
    """How the start time is shown."""

    H24 = "24h"
    H12 = "12h"


class Switch(str, enum.Enum):
    """An explicit on/off value for options like ``--notify true``."""

    TRUE = "true"
    FALSE = "false"


class TimerOutcome(str, enum.Enum):
    """How a run ended."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TimerSpec(BaseModel):
    """Everything one countdown run needs to know, fixed at startup."""

    model_config = ConfigDict(frozen=True)

    total_duration: timedelta
    name: Optional[str] = None
    notify: bool = True
    clock_format: ClockFormat = ClockFormat.H24

    @field_validator("total_duration")
    @classmethod
    def _not_negative(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("duration must not be negative")
        return value

    @property
    def title(self) -> str:
        return self.name or DEFAULT_TITLE


class RunState(BaseModel):
    """Start markers captured once when the loop begins.

    ``start_instant`` is a monotonic reading used for all elapsed-time maths;
    ``started_at`` is the wall clock and is only ever displayed.
    """

    model_config = ConfigDict(frozen=True)

    start_instant: float
    started_at: datetime = Field(default_factory=datetime.now)


class FrameState(BaseModel):
    """Per-frame countdown values."""

    elapsed: timedelta
    remaining: timedelta
    percent: int = Field(ge=0, le=100)

    @classmethod
    def at(cls, total: timedelta, elapsed_seconds: float) -> FrameState:
        """Build the frame for ``elapsed_seconds`` into a run of length ``total``."""
        elapsed_seconds = max(elapsed_seconds, 0.0)
        total_seconds = total.total_seconds()
        if total_seconds <= 0:
            percent = 100
        else:
            # Truncate rather than round: 99.6% reads as 99%.
            percent = min(int(elapsed_seconds / total_seconds * 100), 100)
        elapsed = timedelta(seconds=elapsed_seconds)
        remaining = max(total - elapsed, timedelta(0))
        return cls(elapsed=elapsed, remaining=remaining, percent=percent)


class AppConfig(BaseModel):
    """User defaults (persisted to ~/.config/hourglass/config.json)."""

    name: Optional[str] = None
    notify: bool = True
    clock_format: ClockFormat = ClockFormat.H24
    poll_interval_ms: int = Field(default=20, ge=20, le=100)
