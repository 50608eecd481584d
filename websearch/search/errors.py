"""Search failure types.

Hard failures are exceptions and abort the remaining protocol steps.
Soft failures are plain records returned to the caller and only logged.
"""

from __future__ import annotations

from dataclasses import dataclass


class SearchError(Exception):
    """Base class for failures that end a search."""

    def __init__(self, message: str, *, stage: str | None = None):
        super().__init__(message)
        self.stage = stage


class LaunchError(SearchError):
    """Raised when the browser or its driver cannot be started."""

    def __init__(self, message: str):
        super().__init__(message, stage="launch")


class WaitTimeoutError(SearchError):
    """Raised when a required element did not appear within the timeout budget."""


class InvalidEngineError(SearchError):
    """Raised for an unknown engine name, before any browser is started."""

    def __init__(self, engine: str):
        super().__init__(f"unknown search engine: {engine}", stage="validate")
        self.engine = engine


@dataclass(slots=True)
class SoftFailure:
    """An optional interaction that did not succeed."""

    stage: str
    message: str
