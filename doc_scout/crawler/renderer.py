"""
Rendered fetcher: loads a page in headless Chromium (playwright) so that
script-built content is present before extraction.

One :class:`BrowserManager` lives for exactly one top-level request; every
fetch opens its own browser context and closes it whatever happens.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, Response, Route
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from doc_scout.config import ExplorerConfig
from doc_scout.crawler.models import FetchOutcome, RawPage
from doc_scout.errors import (
    BrowserLaunchError,
    EmptyContent,
    HttpStatusError,
    NetworkError,
    RenderTimeout,
    ScoutError,
)
from doc_scout.logger import get_logger

__all__ = ("BrowserManager", "RenderedFetcher")

_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]
_BODY_TEXT_LENGTH_JS = (
    "() => (document.body && document.body.innerText) ? document.body.innerText.trim().length : 0"
)

log = get_logger("renderer")


class BrowserManager:
    """Lazily launched, request-scoped browser with bounded launch retries."""

    def __init__(self, config: ExplorerConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> BrowserManager:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def launched(self) -> bool:
        return self._browser is not None

    async def acquire(self) -> Browser:
        """Return the running browser, launching it on first use."""
        async with self._lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser
            attempts = self.config.launch_attempts
            for attempt in range(1, attempts + 1):
                try:
                    self._browser = await self._launch()
                    log.debug("Browser launched (attempt %d/%d)", attempt, attempts)
                    return self._browser
                except PlaywrightError as exc:
                    log.warning("Browser launch attempt %d/%d failed: %s", attempt, attempts, exc)
                    await self._stop_playwright()
                    if attempt == attempts:
                        raise BrowserLaunchError(f"Failed to launch browser: {exc}") from exc
                    await asyncio.sleep(self.config.launch_backoff)
            raise BrowserLaunchError("Failed to launch browser")  # pragma: no cover

    async def _launch(self) -> Browser:
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        return await self._playwright.chromium.launch(headless=self.config.headless, args=_LAUNCH_ARGS)

    async def close(self) -> None:
        browser, self._browser = self._browser, None
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as exc:
                log.debug("Browser close failed: %s", exc)
        await self._stop_playwright()

    async def _stop_playwright(self) -> None:
        playwright, self._playwright = self._playwright, None
        if playwright is not None:
            try:
                await playwright.stop()
            except PlaywrightError as exc:
                log.debug("Playwright stop failed: %s", exc)


class RenderedFetcher:
    """Fetches a URL through :class:`BrowserManager`, blocking non-textual resources."""

    def __init__(self, manager: BrowserManager, config: ExplorerConfig) -> None:
        self.manager = manager
        self.config = config

    async def fetch(self, url: str, timeout: Optional[float] = None) -> FetchOutcome:
        """
        Render *url* and return its DOM serialisation.

        Every failure on this path is FATAL for the branch: there is no
        further strategy to fall back to.
        """
        budget = self.config.render_timeout if timeout is None else min(timeout, self.config.render_timeout)
        try:
            browser = await self.manager.acquire()
        except BrowserLaunchError as exc:
            exc.url = url
            return FetchOutcome.fatal(exc)

        context: Optional[BrowserContext] = None
        try:
            context = await browser.new_context(
                user_agent=self.config.user_agent,
                viewport={"width": self.config.viewport_width, "height": self.config.viewport_height},
            )
            page = await context.new_page()
            await page.route("**/*", self._block_resources)
            response = await self._navigate(page, url, budget)
            if response is None:
                raise RenderTimeout("No response received", url)
            if response.status != 200:
                raise HttpStatusError(response.status, url)
            text_length = await page.evaluate(_BODY_TEXT_LENGTH_JS)
            if not text_length or text_length < self.config.min_rendered_text_length:
                raise EmptyContent("Page appears to be empty", url)
            html = await page.content()
            title = await page.title()
            return FetchOutcome.success(RawPage(url=page.url or url, html=html, title=title, rendered=True))
        except ScoutError as exc:
            return FetchOutcome.fatal(exc)
        except PlaywrightError as exc:
            return FetchOutcome.fatal(NetworkError(f"Rendering failed: {exc}", url))
        finally:
            if context is not None:
                await self._close_context(context)

    async def _navigate(self, page: Page, url: str, budget: float) -> Optional[Response]:
        attempts = self.config.navigation_attempts
        per_attempt_ms = budget * 1000 / attempts
        last_error: Optional[PlaywrightError] = None
        for attempt in range(1, attempts + 1):
            try:
                log.debug("Navigating to %s (attempt %d/%d)", url, attempt, attempts)
                return await page.goto(url, wait_until="networkidle", timeout=per_attempt_ms)
            except PlaywrightError as exc:
                last_error = exc
                log.warning("Navigation attempt %d/%d for %s failed: %s", attempt, attempts, url, exc)
                if attempt < attempts:
                    await asyncio.sleep(self.config.navigation_backoff)
        raise RenderTimeout(f"Navigation failed after {attempts} attempts: {last_error}", url) from last_error

    async def _block_resources(self, route: Route) -> None:
        if route.request.resource_type in self.config.blocked_resource_types:
            await route.abort()
        else:
            await route.continue_()

    @staticmethod
    async def _close_context(context: BrowserContext) -> None:
        try:
            await context.close()
        except PlaywrightError as exc:
            log.debug("Context close failed: %s", exc)
