"""Per-engine selectors and URL templates."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from websearch.search.errors import InvalidEngineError

_DUCKDUCKGO_SETTINGS = (
    "kl=wt-wt&kp=-2&kav=1&kf=-1&kac=-1&kbh=-1&ko=-1&k1=-1&kv=n&kz=-1"
    "&kat=-1&kbg=-1&kbe=0&kpsb=-1"
)


@dataclass(frozen=True, slots=True)
class ExtractionStrategy:
    """Everything engine-specific about a search: where to go and what to read."""

    name: str
    search_url: str
    results_container: str
    text_selectors: tuple[str, ...]
    link_selector: str
    image_url: str
    image_container: str
    image_selector: str
    consent_selector: str | None = None
    scroll_for_links: bool = False

    def build_search_url(self, query: str, count: int) -> str:
        return self.search_url.format(query=quote(query, safe=""), count=count)

    def build_image_url(self, query: str) -> str:
        return self.image_url.format(query=quote(query, safe=""))


GOOGLE = ExtractionStrategy(
    name="google",
    search_url="https://google.com/search?hl=en&q={query}&num={count}",
    results_container="#res",
    consent_selector="#L2AGLb",
    text_selectors=(
        ".wDYxhc",  # answer box
        ".hgKElc",  # knowledge panel
        ".r025kc.lVm3ye",  # page snippets
        ".yDYNvb.lyLwlc",  # older snippet markup
    ),
    link_selector=".yuRUbf a",
    image_url="https://google.com/search?hl=en&q={query}&tbm=isch",
    image_container="#search .ob5Hkd img",
    image_selector=".ob5Hkd img",
)

DUCKDUCKGO = ExtractionStrategy(
    name="duckduckgo",
    search_url=f"https://duckduckgo.com/?{_DUCKDUCKGO_SETTINGS}&q={{query}}",
    results_container="#web_content_wrapper",
    text_selectors=('[data-result="snippet"]',),
    link_selector='[data-testid="result-title-a"]',
    scroll_for_links=True,
    image_url="https://duckduckgo.com/?kp=-2&kl=wt-wt&q={query}&iax=images&ia=images",
    image_container="#zci-images img.tile--img__img",
    image_selector="img.tile--img__img",
)

STRATEGIES: dict[str, ExtractionStrategy] = {
    GOOGLE.name: GOOGLE,
    DUCKDUCKGO.name: DUCKDUCKGO,
}


def get_strategy(engine: str) -> ExtractionStrategy:
    strategy = STRATEGIES.get(engine) if isinstance(engine, str) else None
    if strategy is None:
        raise InvalidEngineError(str(engine))
    return strategy
