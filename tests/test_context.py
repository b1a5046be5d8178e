# -*- coding: utf-8 -*-
"""
Unit Tests for CollectionContext

Lifecycle of one collection view: init, teardown and navigation.
"""

import asyncio

import pytest

from conftest import SAMPLE_ITEMS, SAMPLE_TITLE, run, wait_until
from transync.engine import Phase
from transync.surface import CollectionContext, ContextNotInitialized, ContextSettings, InMemoryView


class TestLifecycle:

    def test_surface_requires_init(self, client):
        context = CollectionContext(client)

        assert not context.active
        with pytest.raises(ContextNotInitialized):
            context.surface

    def test_double_init_is_rejected(self, make_context, view):
        async def scenario():
            context = make_context(view)
            with pytest.raises(RuntimeError):
                context.init(view)

        run(scenario())

    def test_teardown_cancels_run_clears_store_and_detaches(self, make_context, view, service):
        service.delays["<p>two</p>"] = 5.0

        async def scenario():
            context = make_context(view)
            surface = context.surface
            store = context.store
            watcher = context.watcher
            orchestrator = context.orchestrator

            surface.toggle_all()
            await wait_until(lambda: service.calls_for("<p>two</p>") == 1)
            run_task = surface.run_task

            await context.teardown()

            assert run_task.done()
            assert orchestrator.phase == Phase.IDLE
            assert len(store) == 0
            assert store.get_title() is None
            assert not watcher.attached
            assert not context.active

            # Mounts after teardown reach nobody
            view.unmount(["1"])
            view.mount(["1"])
            await asyncio.sleep(0.05)
            assert view.displayed_content("1") == "<p>one</p>"
            assert store.get("1") is None

        run(scenario())
        assert service.calls_for("<p>three</p>") == 0

    def test_navigate_aborts_in_flight_manual_toggle(self, make_context, view, service, renderer):
        service.delays["<p>one</p>"] = 0.1
        other = InMemoryView([("a", "<p>alpha</p>")])

        async def scenario():
            context = make_context(view)
            old_store = context.store
            old_scheduler = context.scheduler
            toggle = asyncio.ensure_future(context.surface.toggle_item("1"))
            await wait_until(lambda: service.call_count == 1)

            await context.navigate(other)
            rendered_before = list(renderer.items)

            assert await toggle is False
            await asyncio.sleep(0.15)

            assert renderer.items == rendered_before
            assert old_store.get("1") is None
            assert view.displayed_content("1") == "<p>one</p>"
            assert not old_scheduler.is_pending(("error", "1"))

        run(scenario())

    def test_navigate_aborts_toggle_waiting_on_batch_lock(self, make_context, view, service):
        service.delays["<p>one</p>"] = 0.1

        async def scenario():
            context = make_context(view)
            surface = context.surface
            surface.toggle_all()
            await wait_until(lambda: service.calls_for("<p>one</p>") == 1)
            toggle = asyncio.ensure_future(surface.toggle_item("1"))
            await asyncio.sleep(0.01)

            await context.navigate(InMemoryView([("a", "<p>alpha</p>")]))

            assert await toggle is False

        run(scenario())
        assert service.calls_for("<p>one</p>") == 1

    def test_teardown_cancels_pending_error_indicators(self, make_context, view, service):
        service.failures["<p>one</p>"] = 500

        async def scenario():
            context = make_context(view, error_display_ms=5000)
            scheduler = context.scheduler
            await context.surface.toggle_item("1")
            assert scheduler.is_pending(("error", "1"))

            await context.teardown()
            assert not scheduler.is_pending(("error", "1"))

        run(scenario())

    def test_teardown_is_idempotent(self, make_context, view):
        async def scenario():
            context = make_context(view)
            await context.teardown()
            await context.teardown()
            assert not context.active

        run(scenario())


class TestNavigation:

    def test_navigate_starts_from_clean_state(self, make_context, view, service):
        other = InMemoryView([("a", "<p>alpha</p>")], title="Other thread")
        other.mount(["a"])

        async def scenario():
            context = make_context(view)
            await context.orchestrator.run("ko")
            old_store = context.store

            surface = await context.navigate(other)

            assert context.store is not old_store
            assert len(context.store) == 0
            assert surface.get_phase() == Phase.IDLE
            assert surface.get_progress().total == 0
            assert surface.target_language == "ko"

            summary = await context.orchestrator.run("ko")
            assert summary.progress.total == 2
            assert other.displayed_content("a") == "[ko] <p>alpha</p>"

        run(scenario())
        assert service.call_count == 4 + 2

    def test_returning_to_a_collection_refetches(self, make_context, view, service):
        other = InMemoryView([("a", "<p>alpha</p>")])

        async def scenario():
            context = make_context(view)
            await context.surface.toggle_item("1")
            await context.navigate(other)

            fresh = InMemoryView(SAMPLE_ITEMS, title=SAMPLE_TITLE)
            fresh.mount(["1"])
            surface = await context.navigate(fresh)
            assert fresh.displayed_content("1") == "<p>one</p>"

            await surface.toggle_item("1")
            assert fresh.displayed_content("1") == "[ko] <p>one</p>"

        run(scenario())
        assert service.calls_for("<p>one</p>") == 2

    def test_settings_from_config(self):
        settings = ContextSettings.from_config({
            "target_language": "ja",
            "ui_language": "ko",
            "error_display_ms": 1500,
            "remount_debounce_ms": 50,
        })

        assert settings.target_language == "ja"
        assert settings.ui_language == "ko"
        assert settings.error_display_ms == 1500.0
        assert settings.remount_debounce_ms == 50.0
