"""Selector-driven extraction helpers."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from websearch.search.errors import SoftFailure

if TYPE_CHECKING:
    from websearch.browser.session import BrowserSession

CLICK_TIMEOUT_MS = 1000


class InteractionOutcome(str, Enum):
    """Result of an optional click."""

    ABSENT = "absent"
    CLICKED = "clicked"
    FAILED = "failed"


async def extract_text(session: BrowserSession, selectors: Sequence[str]) -> str:
    """Join the non-empty text of every match, in selector then element order."""
    fragments: list[str] = []
    for selector in selectors:
        for text in await session.texts(selector):
            if text and text.strip():
                fragments.append(text)
    return "\n".join(fragments)


async def extract_links(
    session: BrowserSession,
    selector: str,
    attribute: str = "href",
) -> list[str]:
    values = await session.attribute_values(selector, attribute)
    return [value for value in values if value]


async def extract_images(session: BrowserSession, selector: str, limit: int) -> list[str]:
    """Return at most ``limit`` image sources in page order."""
    if limit <= 0:
        return []
    values = await session.attribute_values(selector, "src")
    return [value for value in values if value][:limit]


async def click_first_if_present(
    session: BrowserSession,
    selector: str,
    *,
    timeout_ms: int = CLICK_TIMEOUT_MS,
) -> tuple[InteractionOutcome, SoftFailure | None]:
    """Click the first element matching ``selector`` if there is one.

    Never raises for a missing or unclickable element: the outcome says what
    happened and a failed click comes back as a ``SoftFailure``.
    """
    try:
        if await session.count(selector) == 0:
            logger.debug("No element for '{}', skipping click", selector)
            return InteractionOutcome.ABSENT, None
        await session.click_first(selector, timeout_ms)
    except Exception as e:
        failure = SoftFailure(stage="click", message=f"'{selector}': {e}")
        logger.warning("Optional click failed: {}", failure.message)
        return InteractionOutcome.FAILED, failure

    return InteractionOutcome.CLICKED, None
