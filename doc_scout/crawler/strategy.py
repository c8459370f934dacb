"""
Fetch strategy selection: lightweight GET first, headless rendering as fallback.
"""
from __future__ import annotations

from typing import Optional, Protocol

from doc_scout.crawler.models import FetchOutcome, FetchStatus, RawPage
from doc_scout.errors import NetworkError, ScoutError
from doc_scout.logger import get_logger

__all__ = ("PageFetcher", "FetchStrategySelector")

log = get_logger("strategy")


class PageFetcher(Protocol):
    async def fetch(self, url: str, timeout: Optional[float] = None) -> FetchOutcome: ...


def _error_of(outcome: FetchOutcome, url: str) -> ScoutError:
    return outcome.error or NetworkError("Fetch failed without a reason", url)


class FetchStrategySelector:
    """Probe-and-fallback policy over two :class:`PageFetcher` implementations."""

    def __init__(self, lightweight: PageFetcher, rendered: Optional[PageFetcher] = None) -> None:
        self.lightweight = lightweight
        self.rendered = rendered

    async def fetch(self, url: str, timeout: Optional[float] = None) -> RawPage:
        """
        Return the raw page for *url* or raise the classified :class:`ScoutError`.

        RETRYABLE lightweight outcomes go to the rendered fetcher when there is
        one; FATAL outcomes are raised immediately. A RETRYABLE outcome that
        still carries a page is returned when rendering is unavailable or fails.
        """
        outcome = await self.lightweight.fetch(url, timeout)
        if outcome.ok:
            return outcome.page
        fallback = outcome.page if outcome.status is FetchStatus.RETRYABLE else None
        if outcome.status is FetchStatus.FATAL or self.rendered is None:
            if fallback is not None:
                return fallback
            raise _error_of(outcome, url)

        log.debug("Lightweight fetch of %s failed (%s), falling back to rendering", url, outcome.error)
        rendered = await self.rendered.fetch(url, timeout)
        if rendered.ok:
            return rendered.page
        if fallback is not None:
            log.debug("Rendering %s failed (%s), keeping the lightweight page", url, rendered.error)
            return fallback
        raise _error_of(rendered, url)
