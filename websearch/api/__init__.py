"""HTTP API package."""

from websearch.api.app import create_app

__all__ = ["create_app"]
