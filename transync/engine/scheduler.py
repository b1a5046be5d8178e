import asyncio
from typing import Callable, Dict, Hashable, Optional

from transync.logger import get_logger

logger = get_logger(__name__)


class Scheduler:
    """Keyed one-shot timers on the running event loop.

    Scheduling a key that is already pending replaces the earlier callback,
    which gives debounce semantics for remount scans and restarts the
    countdown for transient error indicators.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handles: Dict[Hashable, asyncio.TimerHandle] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule_after(self, key: Hashable, delay_ms: float, fn: Callable[[], None]) -> None:
        self.cancel(key)

        def fire():
            self._handles.pop(key, None)
            fn()

        self._handles[key] = self._get_loop().call_later(delay_ms / 1000.0, fire)

    def cancel(self, key: Hashable) -> bool:
        handle = self._handles.pop(key, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> None:
        if self._handles:
            logger.debug(f"Cancelling {len(self._handles)} pending timers")
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()

    def is_pending(self, key: Hashable) -> bool:
        return key in self._handles
