"""Search workflow: navigate, wait, extract, tear down."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from loguru import logger

from websearch.search.extractor import (
    click_first_if_present,
    extract_images,
    extract_links,
    extract_text,
)
from websearch.search.models import SearchResult
from websearch.search.scroll import ScrollLoader
from websearch.search.strategies import ExtractionStrategy, get_strategy

if TYPE_CHECKING:
    from websearch.browser.session import BrowserSession
    from websearch.config.schema import SessionConfig

SessionFactory = Callable[[], Awaitable["BrowserSession"]]

DEFAULT_MAX_LINKS = 10


class SearchOrchestrator:
    """Run one search per call, each in its own browser session.

    Steps run strictly in order::

        navigate -> wait for results -> dismiss consent -> extract text
        -> extract links (scrolling if needed) -> image search -> teardown

    Any failed required wait aborts the search; the session is always closed
    before ``search`` returns or raises.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        session_factory: SessionFactory | None = None,
        scroll_loader: ScrollLoader | None = None,
    ):
        from websearch.config.schema import SessionConfig

        self.config = config or SessionConfig()
        self._session_factory = session_factory or self.config.acquire_session
        self.scroll_loader = scroll_loader or ScrollLoader()

    async def search(
        self,
        engine: str,
        query: str,
        *,
        include_images: bool = False,
        max_links: int = DEFAULT_MAX_LINKS,
    ) -> SearchResult:
        strategy = get_strategy(engine)
        max_links = max_links if max_links and max_links > 0 else DEFAULT_MAX_LINKS

        session = await self._session_factory()
        async with session:
            logger.info("Searching {} for: {}", strategy.name, query)
            try:
                result = await self._run(
                    session,
                    strategy,
                    query,
                    include_images=include_images,
                    max_links=max_links,
                )
            except Exception as e:
                logger.warning(
                    "{} search for {!r} failed at stage={}: {}",
                    strategy.name,
                    query,
                    getattr(e, "stage", None) or "unknown",
                    e,
                )
                raise

        logger.info(
            "Found {} text chars, {} links, {} images",
            len(result.results_text),
            len(result.links),
            len(result.images),
        )
        return result

    async def _run(
        self,
        session: BrowserSession,
        strategy: ExtractionStrategy,
        query: str,
        *,
        include_images: bool,
        max_links: int,
    ) -> SearchResult:
        timeout_ms = self.config.timeout_budget

        await session.goto(strategy.build_search_url(query, max_links), timeout_ms)
        await self.config.persist_debug_snapshot(session)
        await session.wait_for(strategy.results_container, timeout_ms, stage="results")

        if strategy.consent_selector:
            await click_first_if_present(session, strategy.consent_selector)

        text = await extract_text(session, strategy.text_selectors)

        if strategy.scroll_for_links:
            await self.scroll_loader.load_until(session, strategy.link_selector, max_links)
        links = (await extract_links(session, strategy.link_selector))[:max_links]

        images: list[str] = []
        if include_images:
            images = await self._search_images(session, strategy, query, timeout_ms)

        return SearchResult(results_text=text, links=links, images=images)

    async def _search_images(
        self,
        session: BrowserSession,
        strategy: ExtractionStrategy,
        query: str,
        timeout_ms: int,
    ) -> list[str]:
        await session.goto(strategy.build_image_url(query), timeout_ms)
        await self.config.persist_debug_snapshot(session)
        await session.wait_for(strategy.image_container, timeout_ms, stage="images")
        return await extract_images(session, strategy.image_selector, self.config.max_images)
