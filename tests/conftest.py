"""Shared fakes: a browser session that serves canned pages keyed by URL."""

from __future__ import annotations

from typing import Any

import pytest

from websearch.search.errors import WaitTimeoutError


def _element(raw: Any) -> dict[str, Any]:
    if isinstance(raw, str):
        return {"text": raw}
    return dict(raw)


class FakeSession:
    """Stands in for ``BrowserSession``.

    ``pages`` maps a URL fragment to ``{selector: [element, ...]}``; an
    element is a text string or a dict with ``text``/``href``/``src``/
    ``clickable``. Each scroll appends the next entry of ``scroll_batches``
    to the current page and grows the height when ``grow_height`` is set.
    """

    def __init__(
        self,
        pages: dict[str, dict[str, list]] | None = None,
        *,
        scroll_batches: list[dict[str, list]] | None = None,
        grow_height: bool = True,
        height: int = 1000,
    ):
        self.pages = pages or {}
        self.scroll_batches = list(scroll_batches or [])
        self.grow_height = grow_height
        self.height = height
        self.elements: dict[str, list[dict[str, Any]]] = {}
        self.visited: list[str] = []
        self.clicked: list[str] = []
        self.sleeps: list[int] = []
        self.scrolls = 0
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    @property
    def url(self) -> str:
        return self.visited[-1] if self.visited else "about:blank"

    async def __aenter__(self) -> FakeSession:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def goto(self, url: str, timeout_ms: int) -> None:
        self.visited.append(url)
        page: dict[str, list] = {}
        for fragment, content in self.pages.items():
            if fragment in url:
                page = content
                break
        self.elements = {sel: [_element(e) for e in items] for sel, items in page.items()}

    async def wait_for(self, selector: str, timeout_ms: int, *, stage: str = "wait") -> None:
        if not self.elements.get(selector):
            raise WaitTimeoutError(f"'{selector}' did not appear within {timeout_ms}ms", stage=stage)

    async def count(self, selector: str) -> int:
        return len(self.elements.get(selector, []))

    async def texts(self, selector: str) -> list[str]:
        return [e.get("text", "") for e in self.elements.get(selector, [])]

    async def attribute_values(self, selector: str, name: str) -> list[str | None]:
        return [e.get(name) for e in self.elements.get(selector, [])]

    async def click_first(self, selector: str, timeout_ms: int) -> None:
        first = self.elements[selector][0]
        if not first.get("clickable", True):
            raise WaitTimeoutError(f"'{selector}' was not clickable", stage="click")
        self.clicked.append(selector)

    async def evaluate(self, script: str) -> Any:
        if "scrollTo" in script:
            self.scrolls += 1
            if self.scroll_batches:
                batch = self.scroll_batches.pop(0)
                for selector, items in batch.items():
                    self.elements.setdefault(selector, []).extend(_element(e) for e in items)
            if self.grow_height:
                self.height += 500
            return None
        if "scrollHeight" in script:
            return self.height
        raise AssertionError(f"unexpected script: {script}")

    async def content(self) -> str:
        return "<html><body>fake</body></html>"

    async def sleep(self, ms: int) -> None:
        self.sleeps.append(ms)

    async def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def make_session():
    def _make(pages=None, **kwargs) -> FakeSession:
        return FakeSession(pages, **kwargs)

    return _make


@pytest.fixture
def session_factory():
    """Wrap a prepared session in an async factory that counts acquisitions."""

    def _wrap(session: FakeSession):
        calls = {"acquired": 0}

        async def factory():
            calls["acquired"] += 1
            return session

        factory.calls = calls
        return factory

    return _wrap
