"""
Lightweight fetcher: a direct aiohttp GET with a browser-like header set.

Fast and cheap, but blind to pages that build their content with scripts;
those come back as RETRYABLE so the strategy selector can hand them to the
rendered fetcher.
"""
from __future__ import annotations

import asyncio
import re
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from doc_scout.config import ExplorerConfig
from doc_scout.crawler.models import FetchOutcome, RawPage
from doc_scout.errors import EmptyContent, HttpStatusError, NetworkError, NonTextResponse
from doc_scout.logger import get_logger
from doc_scout.parser.html_parser import strip_markup

__all__ = ("LightweightFetcher", "default_headers", "TEXT_MIME_TYPES")

TEXT_MIME_TYPES = ("text/html", "application/xhtml+xml", "text/plain")
#: statuses that say the page is gone; a browser will not do better
_FATAL_STATUS = (404, 410)
_SCRIPT_RE = re.compile(r"<script\b", re.IGNORECASE)

log = get_logger("fetcher")


def default_headers(user_agent: str) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }


def _is_text(content_type: str) -> bool:
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime in TEXT_MIME_TYPES or mime.startswith("text/")


def _needs_scripts(text_length: int, html: str, min_length: int) -> bool:
    """An empty body, or a short one shipped with scripts, is most likely a client-rendered shell."""
    return text_length == 0 or (text_length < min_length and bool(_SCRIPT_RE.search(html)))


class LightweightFetcher:
    """Non-rendering fetcher on top of a shared :class:`aiohttp.ClientSession`."""

    def __init__(self, session: ClientSession, config: ExplorerConfig) -> None:
        self.session = session
        self.config = config

    async def fetch(self, url: str, timeout: Optional[float] = None) -> FetchOutcome:
        """
        GET *url* once.

        Returns SUCCESS with the decoded body for a 200 textual response,
        FATAL for 404/410 and RETRYABLE for everything else. A short page
        with scripts is RETRYABLE but still carries its body.
        """
        budget = self.config.http_timeout if timeout is None else min(timeout, self.config.http_timeout)
        log.debug("GET %s (timeout %.1fs)", url, budget)
        try:
            async with self.session.get(
                url,
                timeout=ClientTimeout(total=budget),
                headers=default_headers(self.config.user_agent),
                allow_redirects=True,
                raise_for_status=False,
            ) as resp:
                if resp.status != 200:
                    error = HttpStatusError(resp.status, url)
                    if resp.status in _FATAL_STATUS:
                        return FetchOutcome.fatal(error)
                    return FetchOutcome.retryable(error)
                content_type = resp.headers.get("Content-Type", "")
                if not _is_text(content_type):
                    return FetchOutcome.retryable(
                        NonTextResponse(f"Unexpected content type {content_type or 'none'!r}", url)
                    )
                text = await resp.text(errors="replace")
                final_url = str(resp.url)
        except asyncio.TimeoutError:
            return FetchOutcome.retryable(NetworkError(f"Timed out after {budget:.1f}s", url))
        except ClientError as exc:
            return FetchOutcome.retryable(NetworkError(f"{type(exc).__name__}: {exc}", url))

        page = RawPage(url=final_url, html=text)
        text_length = len(strip_markup(text))
        if _needs_scripts(text_length, text, self.config.min_rendered_text_length):
            error = EmptyContent("No readable text without scripts", url)
            # short but readable pages stay usable if rendering does not help
            return FetchOutcome.retryable(error, page if text_length else None)
        return FetchOutcome.success(page)
