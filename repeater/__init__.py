"""Promise-style function repeater for asyncio."""

from .core import Repeater, RepeatedAction, repeat
from .duration import DurationSpec, parse_duration
from .models import RepeaterStatus, RunStats

__all__ = [
    "DurationSpec",
    "RepeatedAction",
    "Repeater",
    "RepeaterStatus",
    "RunStats",
    "parse_duration",
    "repeat",
]
