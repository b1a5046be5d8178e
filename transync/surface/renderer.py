"""Rendering contract between the control surface and whatever draws it."""

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Optional, Protocol

from transync.engine.progress import Phase, Progress


@dataclass(frozen=True)
class ControlState:
    """Everything a bulk-toggle control needs to draw itself."""
    phase: Phase
    progress: Progress
    label: str
    target_language: str
    target_language_name: Optional[str]
    enabled: bool
    can_cancel: bool
    skipped_count: int = 0
    made_progress: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "progress": self.progress.to_dict(),
            "label": self.label,
            "target_language": self.target_language,
            "target_language_name": self.target_language_name,
            "enabled": self.enabled,
            "can_cancel": self.can_cancel,
            "skipped_count": self.skipped_count,
            "made_progress": self.made_progress,
        }


class ControlRenderer(Protocol):

    def render(self, state: ControlState) -> None:
        ...

    def render_item(self, item_id: Hashable, label: str) -> None:
        ...
