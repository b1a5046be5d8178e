"""
In-memory view adapter.

Holds a host-pushed picture of a virtualized list: the full collection (with
original content), the currently mounted window, and what each mounted
representation displays. The web adapter feeds it from HTTP calls; tests drive
it directly.
"""

from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from transync.logger import get_logger
from transync.engine.view import MountCallback, TitleMount

logger = get_logger(__name__)


class InMemoryView:

    def __init__(
        self,
        items: Iterable[Tuple[Hashable, str]] = (),
        title: Optional[str] = None,
        title_mounts: Iterable[TitleMount] = (TitleMount.PRIMARY,),
    ):
        self._order: List[Hashable] = []
        self._originals: Dict[Hashable, str] = {}
        self._displayed: Dict[Hashable, str] = {}
        self._title = title
        self._title_display: Dict[TitleMount, str] = {}
        self._subscribers: List[MountCallback] = []
        self.append_items(items)
        if title is not None:
            for mount in title_mounts:
                self._title_display[TitleMount(mount)] = title

    # ViewAdapter side

    def get_ordered_item_ids(self) -> Sequence[Hashable]:
        return list(self._order)

    def get_original_content(self, item_id: Hashable) -> Optional[str]:
        return self._originals.get(item_id)

    def get_title_original(self) -> Optional[str]:
        return self._title

    def title_mounts(self) -> List[TitleMount]:
        return list(self._title_display)

    def set_title(self, mount: TitleMount, text: str) -> None:
        if mount in self._title_display:
            self._title_display[mount] = text

    def set_item_content(self, item_id: Hashable, content: str) -> None:
        if item_id in self._displayed:
            self._displayed[item_id] = content

    def subscribe_mounts(self, callback: MountCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # Host side

    def append_items(self, items: Iterable[Tuple[Hashable, str]]) -> None:
        """Extend the collection; existing ids keep their position and content."""
        for item_id, content in items:
            if item_id not in self._originals:
                self._order.append(item_id)
                self._originals[item_id] = content

    def mount(self, item_ids: Iterable[Hashable]) -> List[Hashable]:
        """Mount items showing their original content, then notify subscribers."""
        mounted = []
        for item_id in item_ids:
            if item_id not in self._originals:
                logger.warning(f"Ignoring mount of unknown item {item_id!r}")
                continue
            if item_id in self._displayed:
                continue
            self._displayed[item_id] = self._originals[item_id]
            mounted.append(item_id)
        if mounted:
            self._notify(mounted, ())
        return mounted

    def unmount(self, item_ids: Iterable[Hashable]) -> None:
        for item_id in item_ids:
            self._displayed.pop(item_id, None)

    def mount_title(self, mount: TitleMount) -> None:
        mount = TitleMount(mount)
        if self._title is None or mount in self._title_display:
            return
        self._title_display[mount] = self._title
        self._notify((), (mount,))

    def unmount_title(self, mount: TitleMount) -> None:
        self._title_display.pop(TitleMount(mount), None)

    def mounted_ids(self) -> List[Hashable]:
        return [item_id for item_id in self._order if item_id in self._displayed]

    def displayed_content(self, item_id: Hashable) -> Optional[str]:
        return self._displayed.get(item_id)

    def displayed_title(self, mount: TitleMount = TitleMount.PRIMARY) -> Optional[str]:
        return self._title_display.get(TitleMount(mount))

    def _notify(self, item_ids: Sequence[Hashable], title_mounts: Sequence[TitleMount]) -> None:
        for callback in list(self._subscribers):
            callback(list(item_ids), list(title_mounts))
