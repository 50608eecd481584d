"""Browser-driven search engine scraping."""

from websearch.search.errors import (
    InvalidEngineError,
    LaunchError,
    SearchError,
    SoftFailure,
    WaitTimeoutError,
)
from websearch.search.models import SearchResult
from websearch.search.orchestrator import SearchOrchestrator
from websearch.search.strategies import STRATEGIES, ExtractionStrategy, get_strategy

__all__ = [
    "ExtractionStrategy",
    "InvalidEngineError",
    "LaunchError",
    "STRATEGIES",
    "SearchError",
    "SearchOrchestrator",
    "SearchResult",
    "SoftFailure",
    "WaitTimeoutError",
    "get_strategy",
]
