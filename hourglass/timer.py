"""Countdown render loop."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable, Protocol

from rich.console import RenderableType

from hourglass.display import TimerView
from hourglass.models import FrameState, RunState, TimerOutcome, TimerSpec
from hourglass.notify import send_notification

log = logging.getLogger(__name__)

POLL_INTERVAL = 0.02
CANCEL_KEYS = frozenset({"escape", "q"})
NOTIFICATION_TITLE = "Timer"


class Session(Protocol):
    """What the loop needs from the terminal."""

    def poll(self, timeout: float) -> bool: ...

    def read_key(self) -> str: ...

    def draw(self, renderable: RenderableType) -> None: ...


def is_cancel_key(key: str) -> bool:
    return key.lower() in CANCEL_KEYS


def run_timer(
    spec: TimerSpec,
    session: Session,
    *,
    clock: Callable[[], float] = time.monotonic,
    notifier: Callable[[str, str], None] = send_notification,
    poll_interval: float = POLL_INTERVAL,
) -> TimerOutcome:
    """Count down ``spec.total_duration``, redrawing every poll cycle.

    Returns CANCELLED as soon as the user presses Escape or q, and COMPLETED
    once the full duration has elapsed. Terminal failures raised by
    ``session`` propagate unchanged.
    """
    state = RunState(start_instant=clock(), started_at=datetime.now())
    total_seconds = spec.total_duration.total_seconds()
    log.info("Starting %r for %s.", spec.title, spec.total_duration)

    if spec.notify:
        notifier(NOTIFICATION_TITLE, f"{spec.title} has started.")

    while True:
        if session.poll(poll_interval):
            key = session.read_key()
            if is_cancel_key(key):
                log.info("%r cancelled by user.", spec.title)
                return TimerOutcome.CANCELLED
            log.debug("Ignoring key %r.", key)

        elapsed = clock() - state.start_instant
        if elapsed >= total_seconds:
            break

        frame = FrameState.at(spec.total_duration, elapsed)
        session.draw(
            TimerView(
                title=spec.title,
                percent=frame.percent,
                remaining=frame.remaining,
                started_at=state.started_at,
                clock_format=spec.clock_format,
            )
        )

    log.info("%r finished.", spec.title)
    if spec.notify:
        notifier(NOTIFICATION_TITLE, f"{spec.title} is over!")
    return TimerOutcome.COMPLETED
