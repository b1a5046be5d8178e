"""
Collection Context Module

One CollectionContext owns all translation state for one collection view:
store, orchestrator, watcher, title sync, scheduler and control surface.
Navigating to another collection tears everything down and builds it fresh,
so nothing survives across the boundary.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

from transync.logger import get_logger
from transync import i18n
from transync.config import (
    DEFAULT_ERROR_DISPLAY_MS,
    DEFAULT_REMOUNT_DEBOUNCE_MS,
    ClientSettings,
)
from transync.client import TranslationClient
from transync.engine import (
    BulkOrchestrator,
    EventEmitter,
    ItemTranslator,
    ReconciliationWatcher,
    Scheduler,
    TitleSync,
    TranslationStore,
    ViewAdapter,
)
from transync.surface.control import ControlSurface
from transync.surface.renderer import ControlRenderer

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContextSettings:
    target_language: str = "en"
    ui_language: str = i18n.DEFAULT_LANGUAGE
    error_display_ms: float = DEFAULT_ERROR_DISPLAY_MS
    remount_debounce_ms: float = DEFAULT_REMOUNT_DEBOUNCE_MS

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ContextSettings":
        return cls(
            target_language=config.get("target_language", "en"),
            ui_language=config.get("ui_language", i18n.DEFAULT_LANGUAGE),
            error_display_ms=float(config.get("error_display_ms", DEFAULT_ERROR_DISPLAY_MS)),
            remount_debounce_ms=float(config.get("remount_debounce_ms", DEFAULT_REMOUNT_DEBOUNCE_MS)),
        )


class ContextNotInitialized(RuntimeError):
    pass


class CollectionContext:
    """
    Lifecycle owner for one collection view.

    init(view) wires a fresh engine to the view; teardown() cancels any run
    and manual toggles, clears the store and detaches the watcher, in that
    order; navigate(view) does both.
    """

    def __init__(
        self,
        client: TranslationClient,
        settings: Optional[ContextSettings] = None,
        renderer: Optional[ControlRenderer] = None,
    ):
        self.client = client
        self.settings = settings or ContextSettings()
        self.renderer = renderer
        self.view: Optional[ViewAdapter] = None
        self.store: Optional[TranslationStore] = None
        self.events: Optional[EventEmitter] = None
        self.scheduler: Optional[Scheduler] = None
        self.items: Optional[ItemTranslator] = None
        self.title: Optional[TitleSync] = None
        self.orchestrator: Optional[BulkOrchestrator] = None
        self.watcher: Optional[ReconciliationWatcher] = None
        self._surface: Optional[ControlSurface] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any], transport=None, renderer=None) -> "CollectionContext":
        client = TranslationClient(ClientSettings.from_config(config), transport=transport)
        return cls(client, ContextSettings.from_config(config), renderer=renderer)

    @property
    def active(self) -> bool:
        return self._surface is not None

    @property
    def surface(self) -> ControlSurface:
        if self._surface is None:
            raise ContextNotInitialized("No collection is attached; call init() first")
        return self._surface

    def init(self, view: ViewAdapter) -> ControlSurface:
        if self.active:
            raise RuntimeError("Context already initialized; use navigate() to switch collections")

        self.view = view
        self.store = TranslationStore()
        self.events = EventEmitter()
        self.scheduler = Scheduler()
        self.items = ItemTranslator(self.store, self.client, view, self.events)
        self.title = TitleSync(self.store, self.client, view, self.events)
        self.orchestrator = BulkOrchestrator(self.store, view, self.items, self.title, self.events)
        self.watcher = ReconciliationWatcher(
            self.store, view, self.title, self.scheduler, self.settings.remount_debounce_ms
        )
        self._surface = ControlSurface(
            self.store,
            self.orchestrator,
            self.items,
            self.title,
            self.scheduler,
            self.events,
            target_language=self.settings.target_language,
            ui_language=self.settings.ui_language,
            error_display_ms=self.settings.error_display_ms,
            renderer=self.renderer,
        )
        self.watcher.attach()
        logger.info(f"Collection context initialized ({len(view.get_ordered_item_ids())} items)")
        return self._surface

    async def teardown(self) -> None:
        if not self.active:
            return

        # 1. cancel the run and manual toggles, and let them settle
        self.orchestrator.reset()
        pending = self._surface.abort_toggles()
        run_task = self._surface.run_task
        if run_task is not None and not run_task.done():
            run_task.cancel()
            pending.append(run_task)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        # 2. clear cached state
        self.store.clear_all()

        # 3. stop reacting to the old view
        self.watcher.detach()

        self.scheduler.cancel_all()
        self._surface.dispose()
        self.events.clear()
        self._surface = None
        self.view = None
        logger.info("Collection context torn down")

    async def navigate(self, view: ViewAdapter) -> ControlSurface:
        """Switch to another collection, dropping all state of the current one."""
        await self.teardown()
        return self.init(view)

    async def aclose(self) -> None:
        await self.teardown()
        await self.client.aclose()
