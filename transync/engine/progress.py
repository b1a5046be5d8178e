"""
Run State Data Classes

Contains the Phase enum, the Progress counter, the RunState of a bulk run and
the RunSummary returned when a run leaves RUNNING.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from transync.client.cancellation import CancellationToken


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Progress:
    """Steps done out of steps planned; the title counts as step 1."""
    current: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"current": self.current, "total": self.total}


@dataclass
class RunState:
    """Live state of the bulk orchestrator."""
    phase: Phase = Phase.IDLE
    progress: Progress = field(default_factory=Progress)
    current_language: Optional[str] = None
    token: Optional[CancellationToken] = None  # Present only while RUNNING
    success_count: int = 0
    skipped_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "progress": self.progress.to_dict(),
            "current_language": self.current_language,
            "success_count": self.success_count,
            "skipped_count": self.skipped_count,
        }


@dataclass(frozen=True)
class RunSummary:
    """Outcome of one bulk run."""
    phase: Phase
    language: str
    success_count: int
    skipped_count: int
    progress: Progress

    @property
    def made_progress(self) -> bool:
        return self.success_count > 0
