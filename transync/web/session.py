"""
Web session: one engine loop, one collection context, one in-memory view.

All methods are called from Flask worker threads and forward to the engine
loop through EngineRunner.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from transync.logger import get_logger
from transync.engine import TITLE_ID, TitleMount
from transync.surface import CollectionContext, ContextNotInitialized, InMemoryView
from transync.web.runner import EngineRunner

logger = get_logger(__name__)


class WebSession:

    def __init__(self, config: Dict[str, Any], transport=None):
        self.config = config
        self.runner = EngineRunner().start()
        self.context = CollectionContext.from_config(config, transport=transport)
        self.view: Optional[InMemoryView] = None

    def open_collection(
        self,
        items: Iterable[Tuple[str, str]],
        title: Optional[str] = None,
        title_mounts: Iterable[TitleMount] = (TitleMount.PRIMARY,),
        mounted: Iterable[str] = (),
    ) -> Dict[str, Any]:
        """Replace the current collection, dropping all of its translation state."""
        view = InMemoryView(items, title=title, title_mounts=title_mounts)
        mounted = list(mounted)

        async def _open():
            await self.context.navigate(view)
            self.view = view
            view.mount(mounted)
            return self._state()

        result = self.runner.submit(_open())
        logger.info(f"Opened collection with {len(view.get_ordered_item_ids())} items ({len(mounted)} mounted)")
        return result

    def append_items(self, items: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
        view = self._require_view()
        items = list(items)

        def _append():
            view.append_items(items)
            return self._state()

        return self.runner.call(_append)

    def update_mounts(
        self,
        mounted: Iterable[str] = (),
        unmounted: Iterable[str] = (),
        title_mounted: Iterable[TitleMount] = (),
        title_unmounted: Iterable[TitleMount] = (),
    ) -> Dict[str, Any]:
        view = self._require_view()
        mounted, unmounted = list(mounted), list(unmounted)
        title_mounted, title_unmounted = list(title_mounted), list(title_unmounted)

        def _update():
            view.unmount(unmounted)
            for mount in title_unmounted:
                view.unmount_title(mount)
            view.mount(mounted)
            for mount in title_mounted:
                view.mount_title(mount)
            return self._state()

        return self.runner.call(_update)

    def toggle_item(self, item_id: str) -> Tuple[bool, Dict[str, Any]]:
        surface = self.context.surface

        async def _toggle():
            ok = await surface.toggle_item(item_id)
            return ok, self._state()

        return self.runner.submit(_toggle())

    def toggle_title(self) -> Tuple[bool, Dict[str, Any]]:
        surface = self.context.surface

        async def _toggle():
            ok = await surface.toggle_title()
            return ok, self._state()

        return self.runner.submit(_toggle())

    def toggle_all(self) -> Tuple[bool, Dict[str, Any]]:
        surface = self.context.surface

        def _toggle():
            return surface.toggle_all(), self._state()

        return self.runner.call(_toggle)

    def select_language(self, code: str) -> Dict[str, Any]:
        surface = self.context.surface

        def _select():
            surface.select_language(code)
            return self._state()

        return self.runner.call(_select)

    def cancel_run(self) -> Tuple[bool, Dict[str, Any]]:
        surface = self.context.surface

        def _cancel():
            return surface.cancel_run(), self._state()

        return self.runner.call(_cancel)

    def wait_for_run(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        surface = self.context.surface

        async def _wait():
            await surface.wait_for_run()
            return self._state()

        return self.runner.submit(_wait(), timeout=timeout)

    def state(self) -> Dict[str, Any]:
        return self.runner.call(self._state)

    def close(self) -> None:
        if self.runner.running:
            self.runner.submit(self.context.aclose())
            self.runner.stop()

    def _require_view(self) -> InMemoryView:
        if self.view is None:
            raise ContextNotInitialized("No collection is open")
        return self.view

    def _state(self) -> Dict[str, Any]:
        """Serialize the current collection state (runs on the engine loop)."""
        if not self.context.active or self.view is None:
            return {"collection": False}

        surface = self.context.surface
        store = self.context.store
        view = self.view

        items: List[Dict[str, Any]] = []
        for item_id in view.get_ordered_item_ids():
            entry = store.get(item_id)
            items.append({
                "id": item_id,
                "label": surface.item_label(item_id),
                "translated": bool(entry and entry.is_translated),
                "language": entry.language if entry else None,
                "mounted": view.displayed_content(item_id) is not None,
                "displayed": view.displayed_content(item_id),
                "error": surface.has_error(item_id),
            })

        title_entry = store.get_title()
        return {
            "collection": True,
            "control": surface.snapshot().to_dict(),
            "title": {
                "label": surface.item_label(TITLE_ID),
                "translated": bool(title_entry and title_entry.is_translated),
                "mounts": {mount.value: view.displayed_title(mount) for mount in view.title_mounts()},
                "error": surface.has_error(TITLE_ID),
            },
            "items": items,
        }
