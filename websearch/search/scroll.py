"""Infinite-scroll loading driven by page height growth."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from websearch.browser.session import BrowserSession

HEIGHT_ATTEMPTS = 5
HEIGHT_INTERVAL_MS = 1000
MAX_SCROLL_ITERATIONS = 5

_HEIGHT_SCRIPT = "document.body.scrollHeight"
_SCROLL_SCRIPT = "window.scrollTo(0, document.body.scrollHeight)"


async def current_page_height(session: BrowserSession) -> int:
    return int(await session.evaluate(_HEIGHT_SCRIPT) or 0)


async def await_height_increase(
    session: BrowserSession,
    previous_height: int,
    *,
    attempts: int = HEIGHT_ATTEMPTS,
    interval_ms: int = HEIGHT_INTERVAL_MS,
) -> int:
    """Poll the page height and return the first value above ``previous_height``.

    Returns ``previous_height`` unchanged when the page did not grow within
    ``attempts`` polls.
    """
    for _ in range(attempts):
        height = await current_page_height(session)
        await session.sleep(interval_ms)
        if height > previous_height:
            return height
    return previous_height


@dataclass(slots=True)
class ScrollProgress:
    count: int
    iterations: int


class ScrollLoader:
    """Scroll to the bottom until enough elements match or iterations run out."""

    def __init__(
        self,
        *,
        max_iterations: int = MAX_SCROLL_ITERATIONS,
        attempts: int = HEIGHT_ATTEMPTS,
        interval_ms: int = HEIGHT_INTERVAL_MS,
    ):
        self.max_iterations = max_iterations
        self.attempts = attempts
        self.interval_ms = interval_ms

    async def load_until(self, session: BrowserSession, selector: str, wanted: int) -> ScrollProgress:
        count = await session.count(selector)
        if count >= wanted:
            return ScrollProgress(count=count, iterations=0)

        height = await current_page_height(session)
        iterations = 0
        while iterations < self.max_iterations:
            iterations += 1
            await session.evaluate(_SCROLL_SCRIPT)
            height = await await_height_increase(
                session,
                height,
                attempts=self.attempts,
                interval_ms=self.interval_ms,
            )
            count = await session.count(selector)
            logger.debug("Scroll {}: {} matches for '{}', height={}", iterations, count, selector, height)
            if count >= wanted:
                break

        return ScrollProgress(count=count, iterations=iterations)
