"""
transync Test Fixtures

Shared fixtures for all tests. The translation service is faked with an
httpx.MockTransport so every test sees the real client code path, including
request counting, timeouts and cancellation.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from transync.client import TranslationClient  # noqa: E402
from transync.config import ClientSettings  # noqa: E402
from transync.surface import CollectionContext, ContextSettings, InMemoryView  # noqa: E402

API_URL = "http://translate.test/translate"


class FakeTranslationService:
    """Scriptable stand-in for the external translation service."""

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self.headers: List[httpx.Headers] = []
        self.failures: Dict[str, int] = {}
        self.delays: Dict[str, float] = {}
        self.malformed: set = set()
        self.on_request: Optional[Callable[[Dict[str, Any]], None]] = None

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def calls_for(self, content: str) -> int:
        return sum(1 for body in self.requests if body["content"] == content)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        self.headers.append(request.headers)
        if self.on_request is not None:
            self.on_request(body)

        content = body["content"]
        delay = self.delays.get(content)
        if delay:
            await asyncio.sleep(delay)

        if content in self.failures:
            return httpx.Response(
                self.failures[content],
                json={"error": {"message": "service exploded", "code": "E_FAKE"}},
            )
        if content in self.malformed:
            return httpx.Response(200, json={"unexpected": True})

        return httpx.Response(
            200,
            json={
                "translated_content": f"[{body['target_language']}] {content}",
                "provider": "fake",
                "quality": 0.9,
            },
        )


class RecordingRenderer:
    def __init__(self):
        self.states = []
        self.items = []

    def render(self, state):
        self.states.append(state)

    def render_item(self, item_id, label):
        self.items.append((item_id, label))


def run(coro):
    return asyncio.run(coro)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll on the event loop until predicate holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not reached before timeout")
        await asyncio.sleep(0.005)


SAMPLE_ITEMS = [
    ("1", "<p>one</p>"),
    ("2", "<p>two</p>"),
    ("3", "<p>three</p>"),
]
SAMPLE_TITLE = "A thread title"


@pytest.fixture
def service() -> FakeTranslationService:
    return FakeTranslationService()


@pytest.fixture
def client_settings() -> ClientSettings:
    return ClientSettings(api_url=API_URL, api_key="secret-key", timeout_ms=1000)


@pytest.fixture
def client(service, client_settings) -> TranslationClient:
    return TranslationClient(client_settings, transport=httpx.MockTransport(service.handler))


@pytest.fixture
def view() -> InMemoryView:
    view = InMemoryView(SAMPLE_ITEMS, title=SAMPLE_TITLE)
    view.mount([item_id for item_id, _ in SAMPLE_ITEMS])
    return view


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def make_context(client, renderer):
    """Build a CollectionContext; must be called inside the event loop."""

    def _make(view, **overrides) -> CollectionContext:
        settings = ContextSettings(
            target_language=overrides.pop("target_language", "ko"),
            ui_language=overrides.pop("ui_language", "en"),
            error_display_ms=overrides.pop("error_display_ms", 30),
            remount_debounce_ms=overrides.pop("remount_debounce_ms", 10),
        )
        context = CollectionContext(client, settings, renderer=renderer)
        context.init(view)
        return context

    return _make
