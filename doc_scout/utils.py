"""doc_scout.utils: URL helpers shared by the extractor, the walker and the engine."""

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import urldefrag, urljoin, urlparse, urlunparse

from doc_scout.errors import InvalidUrl
from doc_scout.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "is_valid_url",
    "ensure_valid_url",
    "extract_host",
    "resolve_url",
)

_HTTP_SCHEMES = ("http", "https")


def normalize_url(url: str) -> str:
    """Canonical form used as a visited-set key: lower-case scheme/host, no fragment, '/' for empty path."""
    parsed = urlparse(url)
    path = parsed.path or "/"
    normalized = urlunparse(
        (parsed.scheme.lower(), parsed.netloc.lower(), path, parsed.params, parsed.query, "")
    )
    logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def is_valid_url(url: str) -> bool:
    """Absolute http(s) URL with a host."""
    try:
        parsed = urlparse(url)
        return parsed.scheme.lower() in _HTTP_SCHEMES and bool(parsed.hostname)
    except ValueError:
        return False


def ensure_valid_url(url: str) -> str:
    """Return *url* stripped of surrounding whitespace or raise :class:`InvalidUrl`."""
    candidate = (url or "").strip()
    if not is_valid_url(candidate):
        raise InvalidUrl(f"Invalid URL provided: {url!r}", url)
    return candidate


def extract_host(url: str) -> str:
    """Lower-cased hostname without port; empty string when unparseable."""
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def resolve_url(href: str, base: str) -> Optional[str]:
    """Resolve *href* against *base*; ``None`` unless the result is an http(s) URL."""
    try:
        absolute, _ = urldefrag(urljoin(base, href))
    except ValueError as exc:
        logger.debug("Cannot resolve %r against %s: %s", href, base, exc)
        return None
    return absolute if is_valid_url(absolute) else None
