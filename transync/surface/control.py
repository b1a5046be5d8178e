"""
Control Surface Module

User-facing actions over the engine:
- toggle_item / toggle_title: per-entry translate or show original
- toggle_all: start a bulk run, or revert a completed one
- select_language / cancel_run
- Read-only phase, progress and labels for the renderer

The surface listens to engine events and re-renders; the engine never calls
the renderer itself.
"""

import asyncio
from typing import Callable, Hashable, List, Optional, Set

from transync.logger import get_logger
from transync import i18n
from transync import language_codes as lc
from transync.client import CancellationToken, TranslationCancelled, TranslationError
from transync.engine import (
    ITEM_CHANGED,
    PHASE_CHANGED,
    PROGRESS_CHANGED,
    TITLE_ID,
    BulkOrchestrator,
    EventEmitter,
    ItemTranslator,
    Phase,
    Progress,
    RunSummary,
    Scheduler,
    TitleSync,
    TranslationStore,
)
from transync.surface.renderer import ControlRenderer, ControlState

logger = get_logger(__name__)


class ControlSurface:

    def __init__(
        self,
        store: TranslationStore,
        orchestrator: BulkOrchestrator,
        items: ItemTranslator,
        title: TitleSync,
        scheduler: Scheduler,
        events: EventEmitter,
        target_language: str = "en",
        ui_language: str = i18n.DEFAULT_LANGUAGE,
        error_display_ms: float = 3000,
        renderer: Optional[ControlRenderer] = None,
    ):
        self.store = store
        self.orchestrator = orchestrator
        self.items = items
        self.title = title
        self.scheduler = scheduler
        self.events = events
        self.ui_language = ui_language
        self.error_display_ms = error_display_ms
        self.renderer = renderer
        self._target_language = lc.normalize_target_language(target_language)
        self._loading: Set[Hashable] = set()
        self._errors: Set[Hashable] = set()
        self.last_summary: Optional[RunSummary] = None
        self.run_task: Optional[asyncio.Task] = None
        # Manual toggles in flight; aborted together on teardown
        self._toggle_token = CancellationToken()
        self._toggle_tasks: Set[asyncio.Future] = set()
        self._disposed = False
        self._subscriptions: List[Callable[[], None]] = [
            events.on(PROGRESS_CHANGED, self._on_run_changed),
            events.on(PHASE_CHANGED, self._on_run_changed),
            events.on(ITEM_CHANGED, self._on_item_changed),
        ]

    @property
    def target_language(self) -> str:
        return self._target_language

    def get_phase(self) -> Phase:
        return self.orchestrator.phase

    def get_progress(self) -> Progress:
        return self.orchestrator.progress

    def select_language(self, code: str) -> str:
        """
        Set the target language for subsequent actions.

        A running batch keeps the language it started with. Every cached slot
        is invalidated on an actual change, so switching back and forth
        refetches each time.
        """
        language = lc.normalize_target_language(code)
        if language != self._target_language:
            logger.info(f"Target language changed: {self._target_language} -> {language}")
            self._target_language = language
            self.store.invalidate_slots()
            self._render()
        return language

    async def toggle_item(self, item_id: Hashable) -> bool:
        """Translate or restore one item. Returns False when translation failed or was aborted."""
        return await self._toggle(
            item_id, self.items.toggle_item(item_id, self._target_language, self._toggle_token)
        )

    async def toggle_title(self) -> bool:
        return await self._toggle(TITLE_ID, self.title.toggle(self._target_language, self._toggle_token))

    async def _toggle(self, item_id: Hashable, action) -> bool:
        if self._disposed:
            action.close()
            return False

        task = asyncio.ensure_future(action)
        self._toggle_tasks.add(task)
        task.add_done_callback(self._toggle_tasks.discard)

        self._clear_error(item_id)
        self._loading.add(item_id)
        self._render_item(item_id)
        try:
            await task
        except TranslationCancelled:
            logger.debug(f"Toggle of {item_id!r} aborted")
            return False
        except TranslationError as e:
            logger.warning(f"Translating {item_id!r} failed ({e.kind.value}): {e}")
            self._show_error(item_id)
            return False
        finally:
            self._loading.discard(item_id)
        self._render_item(item_id)
        return True

    def abort_toggles(self) -> List[asyncio.Future]:
        """
        Abort manual toggles still waiting on a lock or a response.

        Rendering stops immediately. Returns the aborted tasks so the caller
        can wait for them to settle.
        """
        self._disposed = True
        self._toggle_token.cancel()
        if self._toggle_tasks:
            logger.debug(f"Aborting {len(self._toggle_tasks)} manual toggles")
        return list(self._toggle_tasks)

    def toggle_all(self) -> bool:
        """
        Start a bulk run from IDLE/CANCELLED, or revert a COMPLETED one.

        Returns:
            False while a run is active (the control is disabled), True otherwise
        """
        phase = self.orchestrator.phase
        if phase == Phase.RUNNING:
            logger.debug("toggle_all ignored: bulk run in progress")
            return False
        if phase == Phase.COMPLETED:
            self.orchestrator.revert()
            self.last_summary = None
            return True

        self.last_summary = None
        self.run_task = asyncio.ensure_future(self._run(self._target_language))
        return True

    async def _run(self, language: str) -> Optional[RunSummary]:
        try:
            summary = await self.orchestrator.run(language)
        except Exception as e:
            logger.error(f"Bulk run did not finish: {type(e).__name__}: {e}")
            self._render()
            return None
        self.last_summary = summary
        self._render()
        return summary

    async def wait_for_run(self) -> Optional[RunSummary]:
        """Await the bulk run started by the last toggle_all, if any."""
        if self.run_task is None:
            return None
        return await self.run_task

    def cancel_run(self) -> bool:
        return self.orchestrator.cancel()

    def label(self) -> str:
        phase = self.orchestrator.phase
        if phase == Phase.RUNNING:
            progress = self.orchestrator.progress
            return i18n.t("control.progress", self.ui_language, current=progress.current, total=progress.total)
        if phase == Phase.COMPLETED:
            return i18n.t("control.show_original", self.ui_language)
        if self.last_summary is not None and not self.last_summary.made_progress:
            return i18n.t("control.no_progress", self.ui_language)
        return i18n.t("control.translate_all", self.ui_language)

    def item_label(self, item_id: Hashable) -> str:
        prefix = "title" if item_id is TITLE_ID else "item"
        if item_id in self._errors:
            return i18n.t("item.error", self.ui_language)
        if item_id in self._loading:
            return i18n.t("item.loading", self.ui_language)
        entry = self.store.get(item_id)
        if entry is not None and entry.is_translated:
            return i18n.t(f"{prefix}.show_original", self.ui_language)
        return i18n.t(f"{prefix}.translate", self.ui_language)

    def has_error(self, item_id: Hashable) -> bool:
        return item_id in self._errors

    def snapshot(self) -> ControlState:
        state = self.orchestrator.state
        running = state.phase == Phase.RUNNING
        return ControlState(
            phase=state.phase,
            progress=state.progress,
            label=self.label(),
            target_language=self._target_language,
            target_language_name=lc.get_language_name(self._target_language),
            enabled=not running,
            can_cancel=running,
            skipped_count=state.skipped_count,
            made_progress=self.last_summary.made_progress if self.last_summary else None,
        )

    def dispose(self) -> None:
        self._disposed = True
        self._toggle_token.cancel()
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions.clear()
        for item_id in list(self._errors):
            self.scheduler.cancel(("error", item_id))
        self._errors.clear()
        self._loading.clear()

    def _show_error(self, item_id: Hashable) -> None:
        if self._disposed:
            return
        self._errors.add(item_id)
        self._render_item(item_id)
        self.scheduler.schedule_after(
            ("error", item_id),
            self.error_display_ms,
            lambda: self._expire_error(item_id),
        )

    def _expire_error(self, item_id: Hashable) -> None:
        if item_id in self._errors:
            self._errors.discard(item_id)
            self._render_item(item_id)

    def _clear_error(self, item_id: Hashable) -> None:
        self._errors.discard(item_id)
        self.scheduler.cancel(("error", item_id))

    def _on_run_changed(self, *_args) -> None:
        self._render()

    def _on_item_changed(self, item_id: Hashable) -> None:
        self._render_item(item_id)

    def _render(self) -> None:
        if self.renderer is not None and not self._disposed:
            self.renderer.render(self.snapshot())

    def _render_item(self, item_id: Hashable) -> None:
        if self.renderer is not None and not self._disposed:
            self.renderer.render_item(item_id, self.item_label(item_id))
