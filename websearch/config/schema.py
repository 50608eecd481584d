"""Configuration schema."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from websearch.browser.session import BrowserSession

BrowserKind = Literal["chromium", "chrome", "msedge", "firefox", "webkit"]

SUPPORTED_BROWSERS: tuple[str, ...] = ("chromium", "chrome", "msedge", "firefox", "webkit")
DEFAULT_BROWSER = "chromium"

# Browsers that run on the Chromium engine; the value is the Playwright channel.
_CHROMIUM_CHANNELS: dict[str, str | None] = {
    "chromium": None,
    "chrome": "chrome",
    "msedge": "msedge",
}

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def parse_flag(value: Any, default: bool) -> bool:
    """Parse a boolean-ish value, returning ``default`` when unrecognized."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    logger.debug("Unrecognized boolean value {!r}, using default {}", value, default)
    return default


class Base(BaseModel):
    """Base model accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionConfig(Base):
    """Per-process browser session settings. Immutable once built."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    browser: BrowserKind = DEFAULT_BROWSER
    headless: bool = True
    debug: bool = False
    max_images: int = Field(default=10, ge=0)
    timeout_ms: int = Field(default=5000, ge=100)
    debug_timeout_ms: int = Field(default=5 * 60 * 1000, ge=100)
    debug_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    auto_install_browsers: bool = True
    install_system_deps: bool = False
    locale: str = "en-GB"

    @field_validator("browser", mode="before")
    @classmethod
    def _fallback_browser(cls, value: Any) -> str:
        name = str(value or "").strip().lower()
        if name in SUPPORTED_BROWSERS:
            return name
        if value:
            logger.debug("Unknown browser {!r}, falling back to {}", value, DEFAULT_BROWSER)
        return DEFAULT_BROWSER

    @field_validator("headless", mode="before")
    @classmethod
    def _parse_headless(cls, value: Any) -> bool:
        return parse_flag(value, True)

    @field_validator("debug", "auto_install_browsers", "install_system_deps", mode="before")
    @classmethod
    def _parse_flags(cls, value: Any, info) -> bool:
        return parse_flag(value, info.field_name == "auto_install_browsers")

    @property
    def browser_kind(self) -> str:
        return self.browser

    @property
    def is_headless(self) -> bool:
        return self.headless

    @property
    def is_debug(self) -> bool:
        return self.debug

    @property
    def timeout_budget(self) -> int:
        """Timeout for required waits, in milliseconds.

        The long budget applies only to a visible browser in debug mode.
        """
        if self.debug and not self.headless:
            return self.debug_timeout_ms
        return self.timeout_ms

    def launch_arguments(self, browser_kind: str | None = None) -> dict[str, Any]:
        """Return keyword arguments for ``BrowserType.launch``."""
        kind = browser_kind or self.browser
        kwargs: dict[str, Any] = {"headless": self.headless}

        if kind in _CHROMIUM_CHANNELS:
            kwargs["args"] = [
                "--disable-infobars",
                "--disable-gpu",
                "--no-sandbox",
                "--disable-dev-shm-usage",
                f"--lang={self.locale}",
            ]
            channel = _CHROMIUM_CHANNELS[kind]
            if channel:
                kwargs["channel"] = channel
        elif kind == "firefox":
            kwargs["firefox_user_prefs"] = {"intl.accept_languages": "en,en_US"}

        return kwargs

    async def acquire_session(self) -> BrowserSession:
        """Start a new browser session for one search."""
        from websearch.browser.session import launch_session

        return await launch_session(self)

    async def persist_debug_snapshot(self, session: BrowserSession) -> Path | None:
        """Write the current page markup to the debug directory.

        Does nothing unless debug mode is on. Errors are logged and swallowed.
        """
        if not self.debug:
            return None

        from websearch.browser.session import save_page_source

        return await save_page_source(session, self.debug_dir)


class ServerConfig(Base):
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class Config(Base):
    """Root configuration."""

    session: SessionConfig = Field(default_factory=SessionConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
