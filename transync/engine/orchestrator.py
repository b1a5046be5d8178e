"""
Bulk Orchestrator Module

Runs one cancellable, sequential pass over the complete collection:
- Title first, then every item in collection order, one request at a time
- Cached slots for the run's language are applied without a request
- A failing item is skipped; the run continues
- Cancellation stops before the next step and aborts the in-flight request,
  leaving already-applied translations in place
"""

import asyncio
from typing import Hashable, List

from transync.logger import get_logger
from transync import language_codes as lc
from transync.client import CancellationToken, TranslationCancelled, TranslationError
from transync.engine.events import PHASE_CHANGED, PROGRESS_CHANGED, EventEmitter
from transync.engine.items import ItemTranslator
from transync.engine.progress import Phase, Progress, RunState, RunSummary
from transync.engine.store import TITLE_ID, TranslationStore
from transync.engine.title import TitleSync
from transync.engine.view import ViewAdapter

logger = get_logger(__name__)


class RunAlreadyActive(RuntimeError):
    """A bulk run was requested while another one is RUNNING."""


class BulkOrchestrator:
    """
    State machine: IDLE -> RUNNING -> {COMPLETED, CANCELLED}; COMPLETED -> IDLE on revert.

    A run in which nothing succeeded ends in IDLE rather than COMPLETED, since
    there is nothing to revert.
    """

    def __init__(
        self,
        store: TranslationStore,
        view: ViewAdapter,
        items: ItemTranslator,
        title: TitleSync,
        events: EventEmitter,
    ):
        self.store = store
        self.view = view
        self.items = items
        self.title = title
        self.events = events
        self.state = RunState()

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def progress(self) -> Progress:
        return self.state.progress

    @property
    def is_running(self) -> bool:
        return self.state.phase == Phase.RUNNING

    async def run(self, language: str) -> RunSummary:
        """
        Translate the title and every item into language.

        Raises:
            RunAlreadyActive: If a run is already RUNNING
            ValueError: If language is not a known target language
        """
        if self.is_running:
            raise RunAlreadyActive("A bulk translation run is already active")

        language = lc.normalize_target_language(language)
        steps: List[Hashable] = [TITLE_ID, *self.view.get_ordered_item_ids()]
        token = CancellationToken()

        # Work on a local reference: reset() may swap self.state mid-run
        state = RunState(
            phase=Phase.RUNNING,
            progress=Progress(current=0, total=len(steps)),
            current_language=language,
            token=token,
        )
        self.state = state
        logger.info(f"Bulk run started: {len(steps) - 1} items + title to {language}")
        self.events.emit(PHASE_CHANGED, Phase.RUNNING)
        self.events.emit(PROGRESS_CHANGED, state.progress)

        try:
            for index, item_id in enumerate(steps, start=1):
                if token.cancelled:
                    return self._finish(state, Phase.CANCELLED)

                try:
                    if item_id is TITLE_ID:
                        await self.title.translate(language, token)
                    else:
                        await self.items.translate_item(item_id, language, token)
                    state.success_count += 1
                except TranslationCancelled:
                    return self._finish(state, Phase.CANCELLED)
                except TranslationError as e:
                    state.skipped_count += 1
                    logger.warning(f"Skipping {item_id!r} ({e.kind.value}): {e}")

                state.progress = Progress(current=index, total=len(steps))
                if state is self.state:
                    self.events.emit(PROGRESS_CHANGED, state.progress)
        except asyncio.CancelledError:
            # The owning task was torn down; already-applied results stay
            self._finish(state, Phase.CANCELLED)
            raise
        except Exception:
            logger.exception("Bulk run aborted by unexpected error")
            self._finish(state, Phase.IDLE)
            raise

        if state.success_count == 0:
            logger.warning("Bulk run made no progress: every step was skipped")
            return self._finish(state, Phase.IDLE)
        return self._finish(state, Phase.COMPLETED)

    def cancel(self) -> bool:
        """Request cancellation of the active run. Returns False when idle."""
        token = self.state.token
        if not self.is_running or token is None:
            return False
        token.cancel()
        logger.info(f"Cancellation requested at step {self.state.progress.current + 1}/{self.state.progress.total}")
        return True

    def revert(self) -> int:
        """
        Show every translated item and the title in original form again.

        No requests are made; cached slots survive for instant re-translation.

        Returns:
            Number of items reverted (title excluded)
        """
        if self.is_running:
            raise RunAlreadyActive("Cannot revert while a bulk run is active")

        entries = self.store.translated_entries()
        for entry in entries:
            self.items.show_original(entry.item_id)
        self.title.restore()

        self.state = RunState()
        logger.info(f"Reverted {len(entries)} items and title to original")
        self.events.emit(PHASE_CHANGED, Phase.IDLE)
        self.events.emit(PROGRESS_CHANGED, self.state.progress)
        return len(entries)

    def reset(self) -> None:
        """Cancel any active run and forget the run state."""
        self.cancel()
        self.state = RunState()

    def _finish(self, state: RunState, phase: Phase) -> RunSummary:
        state.phase = phase
        state.token = None
        summary = RunSummary(
            phase=phase,
            language=state.current_language or "",
            success_count=state.success_count,
            skipped_count=state.skipped_count,
            progress=state.progress,
        )
        if phase == Phase.IDLE:
            state.current_language = None
        logger.info(
            f"Bulk run finished: {phase.value} "
            f"(succeeded={summary.success_count}, skipped={summary.skipped_count}, "
            f"progress={summary.progress.current}/{summary.progress.total})"
        )
        if state is self.state:
            self.events.emit(PHASE_CHANGED, phase)
        return summary
