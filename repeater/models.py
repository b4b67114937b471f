"""Status enum and run snapshot model for repeaters."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class RepeaterStatus(str, Enum):
    """Lifecycle status of a repeater run."""

    IDLE = "idle"  # Constructed, no driver started yet
    RUNNING = "running"  # A driver is invoking the action
    COMPLETE = "complete"  # Count exhausted, predicate satisfied, or stopped


class RunStats(BaseModel):
    """Point-in-time snapshot of a repeater's observable state."""

    status: RepeaterStatus = RepeaterStatus.IDLE
    call_count: int = Field(default=0, ge=0)
    delay: Optional[float] = None  # milliseconds
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    run_time: Optional[float] = None  # milliseconds
    stopped: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump(mode="json")
