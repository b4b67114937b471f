"""Parse delay durations given to ``Repeater.every``."""

import re
from datetime import timedelta
from typing import Optional, Union

DurationSpec = Union[int, float, str, timedelta]

# Unit suffix -> milliseconds multiplier
UNIT_MULTIPLIERS: dict[str, int] = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
}

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*(ms|s|m)\s*$")


def parse_duration(spec: DurationSpec) -> Optional[float]:
    """Convert a duration spec to milliseconds.

    Args:
        spec: Milliseconds as a number, a ``timedelta``, or a string made of a
            magnitude and a ``ms``/``s``/``m`` suffix (e.g. ``"500ms"``, ``"2s"``).

    Returns:
        The duration in milliseconds, or None if the spec is malformed
    """
    # bool is an int subclass but never a meaningful duration
    if isinstance(spec, bool):
        return None

    if isinstance(spec, timedelta):
        ms = spec.total_seconds() * 1000
    elif isinstance(spec, (int, float)):
        ms = float(spec)
    elif isinstance(spec, str):
        match = _DURATION_PATTERN.match(spec)
        if not match:
            return None
        magnitude, unit = match.groups()
        ms = float(magnitude) * UNIT_MULTIPLIERS[unit]
    else:
        return None

    if ms < 0 or ms != ms:  # negative or NaN
        return None
    return ms
