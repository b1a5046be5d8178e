"""
View Adapter Contract

The engine never touches a rendering toolkit directly. Everything it needs
from the live view goes through this protocol, so a host can attach the engine
to any virtualized list: a browser bridge, a Qt model, or the in-memory view
behind the web adapter.
"""

from enum import Enum
from typing import Callable, Hashable, Iterable, Optional, Protocol, Sequence

MountCallback = Callable[[Sequence[Hashable], Sequence["TitleMount"]], None]


class TitleMount(str, Enum):
    PRIMARY = "primary"
    COMPACT = "compact"


class ViewAdapter(Protocol):

    def get_ordered_item_ids(self) -> Sequence[Hashable]:
        """Authoritative collection order, including items not mounted yet."""

    def get_original_content(self, item_id: Hashable) -> Optional[str]:
        """Original item content from the authoritative model, or None."""

    def get_title_original(self) -> Optional[str]:
        ...

    def title_mounts(self) -> Iterable[TitleMount]:
        """Title representations currently present in the view."""

    def set_title(self, mount: TitleMount, text: str) -> None:
        ...

    def set_item_content(self, item_id: Hashable, content: str) -> None:
        """Show content for an item; a no-op when the item is not mounted."""

    def subscribe_mounts(self, callback: MountCallback) -> Callable[[], None]:
        """Register for mount notifications; returns an unsubscribe function."""
