# -*- coding: utf-8 -*-
"""
Unit Tests for ControlSurface

Manual toggles, bulk toggle labels, language selection and transient error
indicators.
"""

import asyncio

import httpx
import pytest

from conftest import API_URL, SAMPLE_TITLE, RecordingRenderer, run, wait_until
from transync.client import TranslationClient
from transync.config import ClientSettings
from transync.engine import TITLE_ID, Phase
from transync.surface import CollectionContext, ContextSettings


class TestManualToggle:

    def test_toggle_twice_restores_original_with_one_request(self, make_context, view, service):
        async def scenario():
            context = make_context(view)
            surface = context.surface

            assert await surface.toggle_item("1") is True
            assert view.displayed_content("1") == "[ko] <p>one</p>"
            assert surface.item_label("1") == "Show original"

            assert await surface.toggle_item("1") is True
            assert view.displayed_content("1") == "<p>one</p>"
            assert surface.item_label("1") == "Translate"

            await surface.toggle_item("1")
            assert view.displayed_content("1") == "[ko] <p>one</p>"

        run(scenario())
        assert service.call_count == 1

    def test_language_change_refetches(self, make_context, view, service):
        async def scenario():
            context = make_context(view)
            surface = context.surface

            await surface.toggle_item("1")
            await surface.toggle_item("1")
            surface.select_language("ja")
            await surface.toggle_item("1")

            assert view.displayed_content("1") == "[ja] <p>one</p>"
            assert context.store.get("1").language == "ja"

        run(scenario())
        assert service.call_count == 2

    def test_switching_back_to_previous_language_refetches(self, make_context, view, service):
        async def scenario():
            context = make_context(view)
            surface = context.surface

            await surface.toggle_item("1")
            await surface.toggle_item("1")
            surface.select_language("ja")
            surface.select_language("ko")
            await surface.toggle_item("1")

            assert view.displayed_content("1") == "[ko] <p>one</p>"

        run(scenario())
        assert service.calls_for("<p>one</p>") == 2

    def test_reselecting_same_language_keeps_cache(self, make_context, view, service):
        async def scenario():
            context = make_context(view)
            surface = context.surface

            await surface.toggle_item("1")
            await surface.toggle_item("1")
            surface.select_language("KO")
            await surface.toggle_item("1")

        run(scenario())
        assert service.call_count == 1

    def test_language_change_keeps_displayed_translation_on_remount(self, make_context, view, service):
        async def scenario():
            context = make_context(view)
            surface = context.surface

            await surface.toggle_item("1")
            surface.select_language("ja")

            view.unmount(["1"])
            view.mount(["1"])
            await asyncio.sleep(0.05)
            assert view.displayed_content("1") == "[ko] <p>one</p>"

            # A stale translated item fetches the new language directly
            await surface.toggle_item("1")
            assert view.displayed_content("1") == "[ja] <p>one</p>"
            await surface.toggle_item("1")
            assert view.displayed_content("1") == "<p>one</p>"

        run(scenario())
        assert service.call_count == 2

    def test_translated_item_switches_language_directly(self, make_context, view, service):
        async def scenario():
            context = make_context(view)
            surface = context.surface

            await surface.toggle_item("2")
            surface.select_language("ja")
            await surface.toggle_item("2")

            assert view.displayed_content("2") == "[ja] <p>two</p>"
            assert context.store.get("2").is_translated

        run(scenario())
        assert service.call_count == 2

    def test_title_toggle_uses_text_format(self, make_context, view, service):
        async def scenario():
            context = make_context(view)
            surface = context.surface

            await surface.toggle_title()
            assert view.displayed_title() == f"[ko] {SAMPLE_TITLE}"
            assert surface.item_label(TITLE_ID) == "Show original title"

            await surface.toggle_title()
            assert view.displayed_title() == SAMPLE_TITLE
            assert surface.item_label(TITLE_ID) == "Translate title"

        run(scenario())
        assert service.requests[0]["format"] == "text"
        assert service.call_count == 1

    def test_failed_toggle_shows_transient_error(self, service, view):
        client = TranslationClient(
            ClientSettings(api_url=API_URL, timeout_ms=50),
            transport=httpx.MockTransport(service.handler),
        )
        service.delays["<p>one</p>"] = 1.0
        renderer = RecordingRenderer()

        async def scenario():
            context = CollectionContext(
                client,
                ContextSettings(target_language="ko", error_display_ms=30, remount_debounce_ms=10),
                renderer=renderer,
            )
            surface = context.init(view)

            assert await surface.toggle_item("1") is False
            assert surface.has_error("1")
            assert surface.item_label("1") == "Translation failed"
            assert view.displayed_content("1") == "<p>one</p>"
            assert not context.store.get("1").is_translated

            await asyncio.sleep(0.1)
            assert not surface.has_error("1")
            assert surface.item_label("1") == "Translate"
            await context.teardown()

        run(scenario())
        labels = [label for item_id, label in renderer.items if item_id == "1"]
        assert labels == ["Translating...", "Translation failed", "Translate"]

    def test_retry_clears_error_indicator(self, make_context, view, service):
        service.failures["<p>one</p>"] = 502

        async def scenario():
            context = make_context(view, error_display_ms=5000)
            surface = context.surface

            assert await surface.toggle_item("1") is False
            assert context.scheduler.is_pending(("error", "1"))

            del service.failures["<p>one</p>"]
            assert await surface.toggle_item("1") is True
            assert not surface.has_error("1")
            assert not context.scheduler.is_pending(("error", "1"))

        run(scenario())

    def test_manual_toggle_waits_for_batch_step_on_same_item(self, make_context, view, service):
        service.delays["<p>two</p>"] = 0.1

        async def scenario():
            context = make_context(view)
            surface = context.surface
            surface.toggle_all()
            await wait_until(lambda: service.calls_for("<p>two</p>") == 1)

            # Blocks on the item lock until the bulk step has written its result
            await surface.toggle_item("2")
            await surface.wait_for_run()

            # The toggle saw a translated item and flipped it back
            assert view.displayed_content("2") == "<p>two</p>"
            assert context.store.get("2").translated_content == "[ko] <p>two</p>"

        run(scenario())
        assert service.calls_for("<p>two</p>") == 1


class TestBulkToggle:

    def test_labels_follow_phase(self, make_context, view, service):
        service.delays["<p>one</p>"] = 0.1

        async def scenario():
            context = make_context(view)
            surface = context.surface
            assert surface.label() == "Translate all"

            assert surface.toggle_all() is True
            await wait_until(lambda: context.orchestrator.progress.current == 1)
            assert surface.get_phase() == Phase.RUNNING
            assert surface.label() == "1/4"
            snapshot = surface.snapshot()
            assert not snapshot.enabled
            assert snapshot.can_cancel

            await surface.wait_for_run()
            assert surface.get_phase() == Phase.COMPLETED
            assert surface.label() == "Show original"

            assert surface.toggle_all() is True
            assert surface.get_phase() == Phase.IDLE
            assert surface.label() == "Translate all"

        run(scenario())

    def test_toggle_all_is_ignored_while_running(self, make_context, view, service):
        service.delays[SAMPLE_TITLE] = 0.1

        async def scenario():
            context = make_context(view)
            surface = context.surface
            surface.toggle_all()
            await wait_until(lambda: service.call_count == 1)

            first_task = surface.run_task
            assert surface.toggle_all() is False
            assert surface.run_task is first_task
            await surface.wait_for_run()

        run(scenario())
        assert service.call_count == 4

    def test_run_without_progress_has_distinct_label(self, make_context, view, service):
        for content in [SAMPLE_TITLE, "<p>one</p>", "<p>two</p>", "<p>three</p>"]:
            service.failures[content] = 500

        async def scenario():
            context = make_context(view)
            surface = context.surface
            surface.toggle_all()
            summary = await surface.wait_for_run()

            assert not summary.made_progress
            assert surface.get_phase() == Phase.IDLE
            assert surface.label() == "Nothing could be translated"
            assert surface.snapshot().made_progress is False

        run(scenario())

    def test_cancel_then_toggle_all_resumes_from_cache(self, make_context, view, service):
        service.delays["<p>two</p>"] = 5.0

        async def scenario():
            context = make_context(view)
            surface = context.surface
            surface.toggle_all()
            await wait_until(lambda: service.calls_for("<p>two</p>") == 1)

            assert surface.cancel_run() is True
            summary = await surface.wait_for_run()
            assert summary.phase == Phase.CANCELLED
            assert surface.label() == "Translate all"

            service.delays.clear()
            assert surface.toggle_all() is True
            summary = await surface.wait_for_run()
            assert summary.phase == Phase.COMPLETED

        run(scenario())
        assert service.calls_for(SAMPLE_TITLE) == 1
        assert service.calls_for("<p>one</p>") == 1

    def test_running_batch_keeps_its_language(self, make_context, view, service):
        service.delays["<p>one</p>"] = 0.05

        async def scenario():
            context = make_context(view)
            surface = context.surface
            surface.toggle_all()
            await wait_until(lambda: service.calls_for("<p>one</p>") == 1)

            surface.select_language("ja")
            await surface.wait_for_run()

            assert surface.target_language == "ja"
            assert view.displayed_content("3") == "[ko] <p>three</p>"

        run(scenario())
        assert {body["target_language"] for body in service.requests} == {"ko"}

    def test_renderer_receives_phase_and_progress(self, make_context, view, renderer):
        async def scenario():
            context = make_context(view)
            context.surface.toggle_all()
            await context.surface.wait_for_run()

        run(scenario())

        phases = [state.phase for state in renderer.states]
        assert phases[0] == Phase.RUNNING
        assert phases[-1] == Phase.COMPLETED
        currents = [state.progress.current for state in renderer.states if state.phase == Phase.RUNNING]
        assert currents == sorted(currents)
        assert renderer.states[-1].label == "Show original"


class TestLanguageSelection:

    def test_select_language_normalizes_region(self, make_context, view):
        async def scenario():
            surface = make_context(view).surface
            assert surface.select_language("pt-BR") == "pt"
            assert surface.target_language == "pt"
            assert surface.snapshot().target_language_name == "Portuguese"

        run(scenario())

    @pytest.mark.parametrize("code", ["", "zz", "klingon"])
    def test_invalid_language_is_rejected(self, make_context, view, code):
        async def scenario():
            surface = make_context(view).surface
            with pytest.raises(ValueError):
                surface.select_language(code)
            assert surface.target_language == "ko"

        run(scenario())

    def test_ui_language_localizes_labels(self, make_context, view):
        async def scenario():
            surface = make_context(view, ui_language="ko").surface
            assert surface.label() == "모두 번역"
            assert surface.item_label("1") == "번역"

        run(scenario())
