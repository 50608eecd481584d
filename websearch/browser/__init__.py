"""Browser session package."""

from websearch.browser.session import BrowserSession, launch_session

__all__ = ["BrowserSession", "launch_session"]
