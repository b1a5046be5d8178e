"""
Reconciliation Watcher

Virtualized views destroy and recreate item representations as the user
scrolls. A recreated item shows its original content, so this watcher pushes
cached translations back onto newly mounted items and the compact title.

It only ever reads the store and writes the view; it never requests a
translation.
"""

from typing import Callable, Dict, Hashable, Iterable, Optional, Sequence

from transync.logger import get_logger
from transync.engine.scheduler import Scheduler
from transync.engine.store import TranslationStore
from transync.engine.title import TitleSync
from transync.engine.view import TitleMount, ViewAdapter

logger = get_logger(__name__)

SCAN_KEY = "reconcile-scan"


class ReconciliationWatcher:

    def __init__(
        self,
        store: TranslationStore,
        view: ViewAdapter,
        title: TitleSync,
        scheduler: Scheduler,
        debounce_ms: float = 100,
    ):
        self.store = store
        self.view = view
        self.title = title
        self.scheduler = scheduler
        self.debounce_ms = debounce_ms
        # Insertion-ordered sets of pending mounts
        self._pending_items: Dict[Hashable, None] = {}
        self._pending_title: Dict[TitleMount, None] = {}
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.reapplied_count = 0

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def attach(self) -> None:
        if self.attached:
            return
        self._unsubscribe = self.view.subscribe_mounts(self._on_mounts)
        logger.debug("Reconciliation watcher attached")

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.scheduler.cancel(SCAN_KEY)
        self._pending_items.clear()
        self._pending_title.clear()
        logger.debug("Reconciliation watcher detached")

    def _on_mounts(self, item_ids: Sequence[Hashable], title_mounts: Sequence[TitleMount] = ()) -> None:
        if not self.attached:
            return
        for item_id in item_ids:
            self._pending_items[item_id] = None
        for mount in title_mounts:
            self._pending_title[TitleMount(mount)] = None
        if self._pending_items or self._pending_title:
            self.scheduler.schedule_after(SCAN_KEY, self.debounce_ms, self._scan)

    def _scan(self) -> None:
        item_ids = list(self._pending_items)
        title_mounts = list(self._pending_title)
        self._pending_items.clear()
        self._pending_title.clear()
        self.reconcile(item_ids, title_mounts)

    def reconcile(self, item_ids: Iterable[Hashable], title_mounts: Iterable[TitleMount] = ()) -> int:
        """
        Reapply cached translations to the given freshly mounted representations.

        Returns:
            Number of representations updated
        """
        count = 0
        for item_id in item_ids:
            entry = self.store.get(item_id)
            if entry is None or not entry.is_translated or entry.translated_content is None:
                continue
            self.view.set_item_content(item_id, entry.translated_content)
            count += 1

        count += self.title.reapply(title_mounts)

        if count:
            self.reapplied_count += count
            logger.debug(f"Reapplied {count} cached translations after remount")
        return count
