"""Search engine scraping through a real browser session."""

__version__ = "0.1.0"
