"""
Link extraction and relevance scoring for DocScout.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from doc_scout.crawler.models import LinkCandidate
from doc_scout.utils import resolve_url

__all__ = (
    "INFORMATIVE_WORDS",
    "BOILERPLATE_LABELS",
    "score_link",
    "extract_links",
    "is_boilerplate",
    "filter_boilerplate",
    "rank_links",
)

INFORMATIVE_WORDS = ("guide", "docs", "tutorial", "reference", "example", "api", "learn", "how to")
BOILERPLATE_LABELS = frozenset(
    {"home", "contact", "about", "login", "sign up", "register", "search", "privacy", "terms", "cookies"}
)

TEXT_SCORE_CAP = 5.0
MAIN_CONTENT_BONUS = 5.0
INFORMATIVE_BONUS = 2.0

_SKIP_PREFIXES = ("#", "javascript:", "mailto:", "tel:")


def score_link(text: str, in_main: bool = False) -> float:
    """
    Heuristic relevance of a link.

    Text richness saturates at ``TEXT_SCORE_CAP``; links inside the main content
    element get a flat bonus; every distinct informative word in the text adds
    ``INFORMATIVE_BONUS``.
    """
    relevance = min(len(text) / 10, TEXT_SCORE_CAP)
    if in_main:
        relevance += MAIN_CONTENT_BONUS
    lowered = text.lower()
    relevance += INFORMATIVE_BONUS * sum(1 for word in INFORMATIVE_WORDS if word in lowered)
    return relevance


def _inside(tag: Tag, container: Optional[Tag]) -> bool:
    if container is None:
        return False
    return any(parent is container for parent in tag.parents)


def extract_links(soup: BeautifulSoup, base_url: str, main: Optional[Tag] = None) -> List[LinkCandidate]:
    """
    Extract scored links from parsed markup, in document order.

    Ignores anchors without href, in-page fragments, javascript:, mailto: and tel:.
    Duplicate targets keep their first position and their best score.
    """
    found: dict[str, LinkCandidate] = {}
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.lower().startswith(_SKIP_PREFIXES):
            continue
        absolute = resolve_url(raw, base_url)
        if absolute is None:
            continue
        text = " ".join(tag.get_text().split())
        candidate = LinkCandidate(url=absolute, text=text, relevance=score_link(text, _inside(tag, main)))
        previous = found.get(absolute)
        if previous is None or candidate.relevance > previous.relevance:
            found[absolute] = candidate
    return list(found.values())


def is_boilerplate(link: LinkCandidate) -> bool:
    """Navigation labels such as "Home" or "Sign up" that rarely lead to topical content."""
    return link.text.strip().lower() in BOILERPLATE_LABELS


def filter_boilerplate(links: Iterable[LinkCandidate]) -> List[LinkCandidate]:
    return [link for link in links if not is_boilerplate(link)]


def rank_links(links: Iterable[LinkCandidate], limit: Optional[int] = None) -> List[LinkCandidate]:
    """Sort by descending relevance; equal scores keep document order."""
    ranked = sorted(links, key=lambda link: link.relevance, reverse=True)
    return ranked if limit is None else ranked[:limit]
