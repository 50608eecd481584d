"""Single-use browser session built on Playwright."""

from __future__ import annotations

import asyncio
import os
import tempfile
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from websearch.browser.installer import install_browser, is_missing_browser_error
from websearch.search.errors import LaunchError, WaitTimeoutError

if TYPE_CHECKING:
    from websearch.config.schema import SessionConfig

_CHROMIUM_FAMILY = ("chromium", "chrome", "msedge")

# Reads a DOM property (resolved URL for href/src) and falls back to the raw attribute.
_ATTRIBUTE_SCRIPT = "(els, name) => els.map(el => el[name] || el.getAttribute(name))"


class BrowserSession:
    """One browser, one context, one page. Owned by a single search.

    The session is closed exactly once; further use raises ``RuntimeError``.
    """

    def __init__(self, *, playwright: Any, browser: Any, context: Any, page: Any):
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._page = page
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def url(self) -> str:
        return self._require_page().url

    async def __aenter__(self) -> BrowserSession:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def goto(self, url: str, timeout_ms: int) -> None:
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        page = self._require_page()
        try:
            await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(
                f"navigation to {url} timed out after {timeout_ms}ms",
                stage="navigate",
            ) from e

    async def wait_for(self, selector: str, timeout_ms: int, *, stage: str = "wait") -> None:
        """Block until an element matching ``selector`` is attached to the DOM."""
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        page = self._require_page()
        try:
            await page.wait_for_selector(selector, state="attached", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(
                f"'{selector}' did not appear within {timeout_ms}ms",
                stage=stage,
            ) from e

    async def count(self, selector: str) -> int:
        return await self._require_page().locator(selector).count()

    async def texts(self, selector: str) -> list[str]:
        return await self._require_page().locator(selector).all_inner_texts()

    async def attribute_values(self, selector: str, name: str) -> list[str | None]:
        return await self._require_page().locator(selector).evaluate_all(_ATTRIBUTE_SCRIPT, name)

    async def click_first(self, selector: str, timeout_ms: int) -> None:
        """Click the first match once it is visible and enabled."""
        from playwright.async_api import TimeoutError as PlaywrightTimeoutError

        element = self._require_page().locator(selector).first
        try:
            await element.wait_for(state="visible", timeout=timeout_ms)
            # click() also waits for the element to be enabled and stable.
            await element.click(timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(
                f"'{selector}' was not clickable within {timeout_ms}ms",
                stage="click",
            ) from e

    async def evaluate(self, script: str) -> Any:
        return await self._require_page().evaluate(script)

    async def content(self) -> str:
        return await self._require_page().content()

    async def sleep(self, ms: int) -> None:
        await self._require_page().wait_for_timeout(ms)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._page = None
        try:
            if self._context:
                await self._context.close()
        finally:
            try:
                if self._browser:
                    await self._browser.close()
            finally:
                if self._playwright:
                    await self._playwright.stop()

    def _require_page(self) -> Any:
        if self._closed or self._page is None:
            raise RuntimeError("Browser session is closed")
        return self._page


async def launch_session(config: SessionConfig) -> BrowserSession:
    """Launch a browser for ``config``, installing it once if the binary is missing."""
    browser_kind = config.browser_kind
    logger.info(
        "Launching browser={} headless={} debug={}",
        browser_kind,
        config.is_headless,
        config.is_debug,
    )

    try:
        return await _launch_once(config, browser_kind)
    except Exception as first_error:
        if not config.auto_install_browsers or not is_missing_browser_error(first_error):
            raise LaunchError(f"failed to launch {browser_kind}: {first_error}") from first_error

        installed = await install_browser(browser_kind, with_deps=config.install_system_deps)
        if not installed.ok:
            raise LaunchError(
                f"failed to install {browser_kind}: {installed.output}"
            ) from first_error

        try:
            return await _launch_once(config, browser_kind)
        except Exception as second_error:
            raise LaunchError(
                f"failed to launch {browser_kind} after install: {second_error}"
            ) from second_error


async def _launch_once(config: SessionConfig, browser_kind: str) -> BrowserSession:
    from playwright.async_api import async_playwright

    playwright = await async_playwright().start()
    browser = None
    try:
        engine = "chromium" if browser_kind in _CHROMIUM_FAMILY else browser_kind
        browser_type = getattr(playwright, engine)
        browser = await browser_type.launch(**config.launch_arguments(browser_kind))

        context = await browser.new_context(locale=config.locale, accept_downloads=False)
        page = await context.new_page()
    except BaseException:
        if browser is not None:
            await browser.close()
        await playwright.stop()
        raise

    return BrowserSession(playwright=playwright, browser=browser, context=context, page=page)


async def save_page_source(session: BrowserSession, directory: Path) -> Path | None:
    """Write the page markup to a new file in ``directory``; log and return None on failure."""
    try:
        markup = await session.content()
        path = await asyncio.to_thread(_write_snapshot, directory, markup)
    except Exception as e:
        logger.warning("Failed to save debug page: {}", e)
        return None

    logger.info("Saved debug page to {}", path)
    return path


def _write_snapshot(directory: Path, markup: str) -> Path:
    # mkstemp adds a random part, so snapshots taken in the same millisecond never collide.
    directory.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(
        prefix=f"WebSearch-debug-{int(time.time() * 1000)}-",
        suffix=".html",
        dir=directory,
    )
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(markup)
    return Path(name)
