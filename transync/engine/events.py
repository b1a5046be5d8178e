"""Engine event names and a minimal one-directional emitter."""

from typing import Any, Callable, Dict, List

from transync.logger import get_logger

logger = get_logger(__name__)

PROGRESS_CHANGED = "progress_changed"
PHASE_CHANGED = "phase_changed"
ITEM_CHANGED = "item_changed"


class EventEmitter:
    """Engine -> subscriber notifications. Subscribers never call back into the emitter."""

    def __init__(self):
        self._listeners: Dict[str, List[Callable[..., Any]]] = {}

    def on(self, event: str, callback: Callable[..., Any]) -> Callable[[], None]:
        self._listeners.setdefault(event, []).append(callback)

        def unsubscribe():
            self.off(event, callback)

        return unsubscribe

    def off(self, event: str, callback: Callable[..., Any]) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event: str, *args: Any) -> None:
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(*args)
            except Exception:
                # A broken subscriber must not stall the engine
                logger.exception(f"Listener for {event} failed")

    def clear(self) -> None:
        self._listeners.clear()
