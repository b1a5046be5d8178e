"""
Title Translation

The title is a singleton entry with up to two simultaneous representations:
the primary heading and a compact one (e.g. a sticky header) that may mount
and unmount on its own. Both are driven from the same cached entry.
"""

from typing import Iterable, Optional

from transync.logger import get_logger
from transync.client import (
    CancellationToken,
    ContentNotFound,
    TranslationClient,
)
from transync.engine.events import ITEM_CHANGED, EventEmitter
from transync.engine.store import TITLE_ID, TranslationEntry, TranslationStore
from transync.engine.view import TitleMount, ViewAdapter

logger = get_logger(__name__)

TITLE_FORMAT = "text"


class TitleSync:

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

    async def translate(self, language: str, token: Optional[CancellationToken] = None) -> bool:
        """
        Show the title translated into language on every present mount.

        Returns:
            True if a network request was made, False if served from cache
        """
        async with self.store.hold(TITLE_ID, token):
            return await self._translate_locked(language, token)

    async def toggle(self, language: str, token: Optional[CancellationToken] = None) -> Optional[TranslationEntry]:
        async with self.store.hold(TITLE_ID, token):
            entry = self.store.get_title()
            if entry is not None and entry.is_translated and entry.language == language:
                self._restore(entry)
                return entry
            await self._translate_locked(language, token)
            return self.store.get_title()

    def restore(self) -> None:
        entry = self.store.get_title()
        if entry is not None and entry.is_translated:
            self._restore(entry)

    def reapply(self, mounts: Iterable[TitleMount]) -> int:
        """Push the cached translation to freshly mounted title representations."""
        entry = self.store.get_title()
        if entry is None or not entry.is_translated or entry.translated_content is None:
            return 0
        count = 0
        for mount in mounts:
            self.view.set_title(mount, entry.translated_content)
            count += 1
        return count

    def _apply(self, text: str) -> None:
        for mount in self.view.title_mounts():
            self.view.set_title(mount, text)

    def _restore(self, entry: TranslationEntry) -> None:
        self.store.toggle(TITLE_ID)
        if entry.original_content is not None:
            self._apply(entry.original_content)
        self.events.emit(ITEM_CHANGED, TITLE_ID)

    async def _translate_locked(self, language: str, token: Optional[CancellationToken]) -> bool:
        entry = self.store.get_title()

        if entry is not None and entry.has_translation(language):
            if not entry.is_translated:
                self.store.toggle(TITLE_ID)
            self._apply(entry.translated_content)
            self.events.emit(ITEM_CHANGED, TITLE_ID)
            return False

        if entry is None or entry.original_content is None:
            original = self.view.get_title_original()
            if not original or not original.strip():
                raise ContentNotFound("No title available to translate", code="content_not_found")
            entry = self.store.get_or_create_title()
            original = entry.capture_original(original)
        else:
            original = entry.original_content

        result = await self.client.translate(original, language, TITLE_FORMAT, token=token)
        self.store.set_translation(TITLE_ID, result.translated_content, language)
        self._apply(result.translated_content)
        self.events.emit(ITEM_CHANGED, TITLE_ID)
        logger.debug(f"Translated title to {language}")
        return True
