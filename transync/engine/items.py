"""
Per-Item Translation

Fetch-or-reuse logic shared by the bulk orchestrator and manual toggles.
Every write to an item entry happens while holding that item's store lock, so
a manual toggle and a bulk step for the same item never interleave.
"""

from typing import Hashable, Optional

from transync.logger import get_logger
from transync.client import (
    CancellationToken,
    ContentNotFound,
    TranslationClient,
)
from transync.engine.events import ITEM_CHANGED, EventEmitter
from transync.engine.store import TranslationEntry, TranslationStore
from transync.engine.view import ViewAdapter

logger = get_logger(__name__)

ITEM_FORMAT = "html"


class ItemTranslator:

    def __init__(
        self,
        store: TranslationStore,
        client: TranslationClient,
        view: ViewAdapter,
        events: EventEmitter,
    ):
        self.store = store
        self.client = client
        self.view = view
        self.events = events

    async def translate_item(
        self, item_id: Hashable, language: str, token: Optional[CancellationToken] = None
    ) -> bool:
        """
        Show an item translated into language, fetching only on a cache miss.

        Returns:
            True if a network request was made, False if served from cache

        Raises:
            TranslationError: The item stays untouched
            TranslationCancelled: The token fired while waiting or mid-request
        """
        async with self.store.hold(item_id, token):
            return await self._translate_locked(item_id, language, token)

    async def toggle_item(
        self, item_id: Hashable, language: str, token: Optional[CancellationToken] = None
    ) -> Optional[TranslationEntry]:
        """Flip an item between original and its translation in language."""
        async with self.store.hold(item_id, token):
            entry = self.store.get(item_id)
            if entry is not None and entry.is_translated and entry.language == language:
                self._show_original(entry)
                return entry
            await self._translate_locked(item_id, language, token)
            return self.store.get(item_id)

    def show_original(self, item_id: Hashable) -> Optional[TranslationEntry]:
        entry = self.store.get(item_id)
        if entry is not None and entry.is_translated:
            self._show_original(entry)
        return entry

    def _show_original(self, entry: TranslationEntry) -> None:
        self.store.toggle(entry.item_id)
        if entry.original_content is not None:
            self.view.set_item_content(entry.item_id, entry.original_content)
        self.events.emit(ITEM_CHANGED, entry.item_id)

    async def _translate_locked(
        self, item_id: Hashable, language: str, token: Optional[CancellationToken]
    ) -> bool:
        entry = self.store.get(item_id)

        if entry is not None and entry.has_translation(language):
            if not entry.is_translated:
                self.store.toggle(item_id)
            self.view.set_item_content(item_id, entry.translated_content)
            self.events.emit(ITEM_CHANGED, item_id)
            return False

        if entry is None or entry.original_content is None:
            original = self.view.get_original_content(item_id)
            if not original or not original.strip():
                raise ContentNotFound(
                    f"No original content available for item {item_id!r}",
                    code="content_not_found",
                    details={"item_id": str(item_id)},
                )
            entry = self.store.get_or_create(item_id)
            original = entry.capture_original(original)
        else:
            original = entry.original_content

        result = await self.client.translate(original, language, ITEM_FORMAT, token=token)
        self.store.set_translation(item_id, result.translated_content, language)
        self.view.set_item_content(item_id, result.translated_content)
        self.events.emit(ITEM_CHANGED, item_id)
        logger.debug(f"Translated item {item_id!r} to {language}")
        return True
