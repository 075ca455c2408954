"""Parse human-readable durations such as ``90``, ``45m`` or ``1h30m``."""

from __future__ import annotations

import re
from datetime import timedelta

from hourglass.errors import InvalidDuration

_NUMBER = re.compile(r"[0-9]+")
_UNIT = re.compile(r"[^0-9\s]+")

# Longer digit runs can never fit in a timedelta.
_MAX_DIGITS = 20

# Milliseconds per unit. Units are case-sensitive.
_UNIT_MS: dict[str, int] = {
    "h": 3_600_000,
    "m": 60_000,
    "s": 1_000,
    "ms": 1,
}


def parse_duration(token: str) -> timedelta:
    """Resolve ``token`` to a nonnegative time span.

    A bare integer is whole seconds. Anything else must be a sequence of
    ``<number><unit>`` groups using ``h``, ``m``, ``s`` or ``ms``, which are
    summed. Raises :class:`InvalidDuration` with a diagnostic message otherwise.
    """
    text = token.strip()
    try:
        if _NUMBER.fullmatch(text):
            return timedelta(seconds=_to_int(token, text))
        return timedelta(milliseconds=_compound_milliseconds(token, text))
    except OverflowError:
        raise InvalidDuration(token, "number is too large") from None


def _to_int(token: str, digits: str) -> int:
    if len(digits.lstrip("0")) > _MAX_DIGITS:
        raise InvalidDuration(token, "number is too large")
    return int(digits)


def _compound_milliseconds(token: str, text: str) -> int:
    if not text:
        raise InvalidDuration(token, "value was empty")

    total = 0
    pos = 0
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue
        number = _NUMBER.match(text, pos)
        if number is None:
            raise InvalidDuration(token, f"expected number at {pos}")
        pos = number.end()
        unit = _UNIT.match(text, pos)
        if unit is None:
            n = number.group()
            raise InvalidDuration(token, f"time unit needed, for example {n}s or {n}m")
        factor = _UNIT_MS.get(unit.group())
        if factor is None:
            supported = ", ".join(_UNIT_MS)
            raise InvalidDuration(
                token, f'unknown time unit "{unit.group()}", supported units: {supported}'
            )
        total += _to_int(token, number.group()) * factor
        pos = unit.end()
    return total
