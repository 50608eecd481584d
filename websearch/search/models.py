"""Search result models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class SearchResult:
    """Text, links and images extracted from one search."""

    results_text: str = ""
    links: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": self.results_text,
            "links": list(self.links),
            "images": list(self.images),
        }
