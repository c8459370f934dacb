"""Content extraction utilities for DocScout.

Turns the markup returned by either fetcher into a :class:`ParsedPage`:

* title — ``<title>`` text, the rendered document title, or a title derived
  from the last URL path segment when the page has none.
* text  — principal readable text, whitespace-normalised and length-bounded.
* links — scored outbound links (see :mod:`doc_scout.crawler.link_extractor`).

The main content element is chosen from :data:`CONTENT_SELECTORS` in order:
documentation containers first, then generic ``main``/``article`` containers,
finally ``body``.  Markup without any usable element (fragments, plain text)
degrades to regex tag stripping.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from html import unescape
from typing import Optional
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from doc_scout.crawler.link_extractor import extract_links
from doc_scout.crawler.models import LinkCandidate, RawPage

__all__: Sequence[str] = (
    "CONTENT_SELECTORS",
    "TRUNCATION_MARKER",
    "ParsedPage",
    "normalize_text",
    "strip_markup",
    "truncate",
    "clean_text",
    "select_main_content",
    "title_from_url",
    "parse_html",
)

CONTENT_SELECTORS: tuple[str, ...] = (
    # documentation specific
    ".markdown-body",
    ".readme",
    ".documentation",
    '[role="main"]',
    # generic content containers
    "main",
    "article",
    ".content",
    "#content",
    ".main-content",
    "#main-content",
    ".docs-content",
    ".docs-body",
    ".docs-markdown",
    "body",
)

TRUNCATION_MARKER = "\n\n[... content truncated]"

_NON_CONTENT_TAGS = ("script", "style", "noscript", "template")

_HEAD_RE = re.compile(r"<head\b.*?</head\s*>", re.IGNORECASE | re.DOTALL)
_SCRIPT_RE = re.compile(r"<script\b.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style\b.*?</style\s*>", re.IGNORECASE | re.DOTALL)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_HSPACE_RE = re.compile(r"[^\S\n]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


@dataclass(slots=True)
class ParsedPage:
    """Extraction result for one fetched page."""

    url: str
    title: Optional[str]
    text: str
    links: list[LinkCandidate] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Text normalisation
# ---------------------------------------------------------------------------


def normalize_text(text: str) -> str:
    """Collapse whitespace runs to one space and blank-line runs to a single blank line."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = (_HSPACE_RE.sub(" ", line).strip() for line in text.split("\n"))
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()


def strip_markup(markup: str) -> str:
    """Plain-markup path: drop head/script/style blocks and all tags by pattern."""
    for pattern in (_HEAD_RE, _SCRIPT_RE, _STYLE_RE, _COMMENT_RE):
        markup = pattern.sub(" ", markup)
    return normalize_text(unescape(_TAG_RE.sub(" ", markup)))


def truncate(text: str, limit: int) -> str:
    """Cut *text* to exactly *limit* characters, the last ones being :data:`TRUNCATION_MARKER`."""
    if len(text) <= limit:
        return text
    return text[: max(limit - len(TRUNCATION_MARKER), 0)] + TRUNCATION_MARKER[: limit]


def clean_text(text: str, limit: int) -> str:
    return truncate(normalize_text(text), limit)


# ---------------------------------------------------------------------------
# DOM helpers
# ---------------------------------------------------------------------------


def _text_length(tag: Tag) -> int:
    return len(tag.get_text().strip())


def select_main_content(soup: BeautifulSoup, min_length: int = 200) -> Optional[Tag]:
    """
    Pick the element holding the principal content.

    For each selector the longest matching element is considered; the first one
    whose text exceeds *min_length* wins, otherwise the longest seen so far.
    """
    best: Optional[Tag] = None
    best_length = -1
    for selector in CONTENT_SELECTORS:
        matches = [m for m in soup.select(selector) if isinstance(m, Tag)]
        if not matches:
            continue
        candidate = max(matches, key=_text_length)
        length = _text_length(candidate)
        if length > min_length:
            return candidate
        if length > best_length:
            best, best_length = candidate, length
    return best


def title_from_url(url: str) -> str:
    """Human-ish title from the last path segment: ``/docs/getting_started.html`` -> ``getting started``."""
    segments = [segment for segment in urlparse(url).path.split("/") if segment]
    if not segments:
        return ""
    title = unquote(segments[-1])
    title = re.sub(r"[_-]", " ", title)
    title = re.sub(r"\.\w+$", "", title)
    title = re.sub(r"([a-z])([A-Z])", r"\1 \2", title)
    return title.strip()


def _document_title(soup: BeautifulSoup) -> str:
    tag = soup.find("title")
    return " ".join(tag.get_text().split()) if isinstance(tag, Tag) else ""


# ---------------------------------------------------------------------------
# Public function
# ---------------------------------------------------------------------------


def parse_html(
    page: RawPage,
    *,
    max_length: int = 10_000,
    min_main_length: int = 200,
) -> ParsedPage:
    """Extract title, bounded text and scored links from a fetched page."""
    soup = BeautifulSoup(page.html, "html.parser")
    title = (page.title or "").strip() or _document_title(soup) or title_from_url(page.url)

    for element in soup(list(_NON_CONTENT_TAGS)):
        element.decompose()

    main = select_main_content(soup, min_main_length)
    if main is not None and _text_length(main):
        text = clean_text(main.get_text(), max_length)
    else:
        text = truncate(strip_markup(page.html), max_length)

    links = extract_links(soup, page.url, main)
    return ParsedPage(url=page.url, title=title or None, text=text, links=links)
