"""
Duration strings in the form accepted by Go's time.ParseDuration.
"""

from __future__ import annotations

import re
from datetime import timedelta

_UNITS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,  # noqa: RUF001
    "μs": 1e-6,  # noqa: RUF001
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_PART_RE = re.compile(r"(?P<value>\d+(?:\.\d*)?|\.\d+)(?P<unit>ns|us|µs|μs|ms|s|m|h)")
_DURATION_RE = re.compile(
    r"[-+]?(?:(?:\d+(?:\.\d*)?|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+"
)


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``90h``, ``1h30m`` or ``1.5s``.

    A bare ``0`` is accepted, as Go does. Every other number needs a unit.

    Raises:
        ValueError: If the string is empty, malformed or too large for a
            timedelta.
    """
    text = text.strip()
    if text in ("0", "+0", "-0"):
        return timedelta(0)
    if not _DURATION_RE.fullmatch(text):
        msg = f"invalid duration {text!r}"
        raise ValueError(msg)

    sign = -1 if text.startswith("-") else 1
    total_seconds = sum(
        float(part.group("value")) * _UNITS[part.group("unit")]
        for part in _PART_RE.finditer(text.lstrip("+-"))
    )
    try:
        return timedelta(seconds=sign * total_seconds)
    except OverflowError as e:
        msg = f"duration {text!r} is out of range"
        raise ValueError(msg) from e


def format_duration(value: timedelta) -> str:
    """Render a duration back to the compact ``1h30m0s`` style."""
    total = int(value.total_seconds())
    sign = "-" if total < 0 else ""
    hours, rest = divmod(abs(total), 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"
