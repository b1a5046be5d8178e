"""
Background event loop for the web adapter.

Flask handlers run on worker threads, while the engine is single-threaded and
cooperative. EngineRunner owns one asyncio loop on a daemon thread; handlers
hand it coroutines and block on the result, so every engine call happens on
the loop thread.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Awaitable, Callable, Optional

from transync.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CALL_TIMEOUT = 60.0


class EngineRunner:

    def __init__(self, name: str = "transync-engine"):
        self.name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "EngineRunner":
        if self.running:
            return self
        self._ready.clear()
        self._thread = threading.Thread(target=self._run_loop, name=self.name, daemon=True)
        self._thread.start()
        self._ready.wait()
        logger.info(f"Engine loop {self.name} started")
        return self

    def _run_loop(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._ready.set()
        try:
            loop.run_forever()
        finally:
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()
            logger.info(f"Engine loop {self.name} stopped")

    def submit(self, coro: Awaitable[Any], timeout: Optional[float] = DEFAULT_CALL_TIMEOUT) -> Any:
        """Run a coroutine on the engine loop and wait for its result."""
        if self._loop is None or not self.running:
            raise RuntimeError("Engine loop is not running")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result(timeout)

    def call(self, fn: Callable[..., Any], *args: Any, timeout: Optional[float] = DEFAULT_CALL_TIMEOUT) -> Any:
        """Run a plain function on the engine loop thread."""

        async def _invoke():
            return fn(*args)

        return self.submit(_invoke(), timeout=timeout)

    def stop(self, timeout: float = 5.0) -> None:
        if self._loop is None or not self.running:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout)
        self._thread = None
        self._loop = None
