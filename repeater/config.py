"""Repeater configuration read from the environment."""

import os
from typing import Any, Optional, Union


def _env_delay(value: Optional[str]) -> Optional[Union[float, str]]:
    """Bare numbers are milliseconds, anything else is passed on as a duration string."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return value


def load_repeater_config() -> dict[str, Any]:
    """Build the repeater configuration from the current environment."""
    return {
        # Log every invocation at DEBUG level
        "debug": os.getenv("REPEATER_DEBUG", "false").lower() == "true",
        # Delay applied to new repeaters, e.g. "250", "250ms", "2s", "1m" (unset means none)
        "default_delay": _env_delay(os.getenv("REPEATER_DEFAULT_DELAY")),
    }


REPEATER_CONFIG: dict[str, Any] = load_repeater_config()
