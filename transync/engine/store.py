"""
Translation Store

Per-item and per-title cache of original content, translated content and
toggle state. No network and no view access.

Each entry holds a single translation slot tagged with the language it was
produced for. Selecting a new target language invalidates every slot, so the
next translate request always refetches; there is no multi-language cache.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict, Hashable, List, Optional

from transync.logger import get_logger
from transync.client.cancellation import CancellationToken
from transync.client.exceptions import TranslationCancelled

logger = get_logger(__name__)


class _TitleId:
    """Sentinel identifying the title entry in locks and events."""

    def __repr__(self) -> str:
        return "TITLE"


TITLE_ID = _TitleId()


@dataclass
class TranslationEntry:
    """Cached translation state for one item (or the title)."""
    item_id: Hashable
    original_content: Optional[str] = None
    translated_content: Optional[str] = None
    language: Optional[str] = None  # None with content set: invalidated, still on screen
    is_translated: bool = False

    def capture_original(self, content: str) -> str:
        """Record the original content once; later captures keep the first value."""
        if self.original_content is None:
            self.original_content = content
        return self.original_content

    def has_translation(self, language: str) -> bool:
        return self.translated_content is not None and self.language == language


class TranslationStore:
    """Cache shared by the orchestrator, per-item actions and the watcher."""

    def __init__(self):
        self._items: Dict[Hashable, TranslationEntry] = {}
        self._title: Optional[TranslationEntry] = None
        self._locks: Dict[Hashable, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: Hashable) -> Optional[TranslationEntry]:
        if item_id is TITLE_ID:
            return self._title
        return self._items.get(item_id)

    def get_or_create(self, item_id: Hashable) -> TranslationEntry:
        if item_id is TITLE_ID:
            return self.get_or_create_title()
        entry = self._items.get(item_id)
        if entry is None:
            entry = TranslationEntry(item_id=item_id)
            self._items[item_id] = entry
        return entry

    def get_title(self) -> Optional[TranslationEntry]:
        return self._title

    def get_or_create_title(self) -> TranslationEntry:
        if self._title is None:
            self._title = TranslationEntry(item_id=TITLE_ID)
        return self._title

    def set_translation(self, item_id: Hashable, content: str, language: str) -> TranslationEntry:
        """Overwrite the entry's single slot and mark it translated."""
        entry = self.get_or_create(item_id)
        if entry.language is not None and entry.language != language:
            logger.debug(f"Replacing {entry.language} slot of {item_id!r} with {language}")
        entry.translated_content = content
        entry.language = language
        entry.is_translated = True
        return entry

    def toggle(self, item_id: Hashable) -> TranslationEntry:
        """
        Flip the display state, keeping a valid slot for instant re-display.

        Raises:
            KeyError: Unknown entry
            ValueError: Flipping to translated without a valid slot
        """
        entry = self.get(item_id)
        if entry is None:
            raise KeyError(item_id)

        if entry.is_translated:
            entry.is_translated = False
            if entry.language is None:
                # Invalidated slot was only kept while on screen
                entry.translated_content = None
            return entry

        if entry.translated_content is None or entry.language is None:
            raise ValueError(f"No cached translation to show for {item_id!r}")
        entry.is_translated = True
        return entry

    def invalidate_slots(self) -> int:
        """
        Forget every cached translation after a target language change.

        Entries currently shown translated keep their content on screen (and
        for remount reapplication) until they flip back to original, but no
        longer match any language. Returns the number of slots invalidated.
        """
        count = 0
        entries = list(self._items.values())
        if self._title is not None:
            entries.append(self._title)
        for entry in entries:
            if entry.translated_content is None:
                continue
            entry.language = None
            if not entry.is_translated:
                entry.translated_content = None
            count += 1
        if count:
            logger.debug(f"Invalidated {count} translation slots")
        return count

    def translated_entries(self) -> List[TranslationEntry]:
        """Item entries currently shown translated, title excluded."""
        return [entry for entry in self._items.values() if entry.is_translated]

    def lock(self, item_id: Hashable) -> asyncio.Lock:
        """Per-item lock serializing bulk and manual writers."""
        lock = self._locks.get(item_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[item_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, item_id: Hashable, token: Optional[CancellationToken] = None) -> AsyncIterator[None]:
        """
        Hold the item's lock, giving up as soon as token fires.

        Raises:
            TranslationCancelled: The token fired before the lock was acquired
        """
        lock = self.lock(item_id)
        if token is None:
            async with lock:
                yield
            return

        if token.cancelled:
            raise TranslationCancelled(f"Cancelled before locking {item_id!r}")

        acquire = asyncio.ensure_future(lock.acquire())
        cancelled = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({acquire, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            if acquire.done() and not acquire.cancelled() and acquire.exception() is None:
                lock.release()
            raise
        finally:
            cancelled.cancel()
            if not acquire.done():
                acquire.cancel()
                await asyncio.gather(acquire, return_exceptions=True)

        acquired = acquire.done() and not acquire.cancelled() and acquire.exception() is None
        if token.cancelled:
            if acquired:
                lock.release()
            raise TranslationCancelled(f"Cancelled while waiting for {item_id!r}")

        try:
            yield
        finally:
            lock.release()

    def clear_all(self) -> None:
        """Drop every item entry, the title entry and the writer locks."""
        logger.debug(f"Clearing store ({len(self._items)} items, title: {self._title is not None})")
        self._items.clear()
        self._title = None
        self._locks.clear()
