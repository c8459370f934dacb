# File: tests/helpers.py
"""Shared test utilities: in-process aiohttp sites and a fake rendered fetcher."""
from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import AsyncIterator
from typing import Optional

from aiohttp import web

from doc_scout.crawler.models import FetchOutcome, RawPage
from doc_scout.errors import EmptyContent


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def html_page(body: str, title: str = "") -> str:
    head = f"<head><title>{title}</title></head>" if title else ""
    return f"<html>{head}<body>{body}</body></html>"


def html_response(body: str, title: str = "", status: int = 200) -> web.Response:
    return web.Response(text=html_page(body, title), content_type="text/html", status=status)


class FakeRendered:
    """Stand-in for the rendered fetcher: serves canned pages, records calls."""

    def __init__(self, pages: Optional[dict[str, str]] = None) -> None:
        self.pages = pages or {}
        self.calls: list[str] = []

    async def fetch(self, url: str, timeout: Optional[float] = None) -> FetchOutcome:
        self.calls.append(url)
        if url in self.pages:
            return FetchOutcome.success(RawPage(url=url, html=self.pages[url], rendered=True))
        return FetchOutcome.fatal(EmptyContent("Page appears to be empty", url))


def make_app(
    pages: dict[str, str],
    hits: Optional[Counter] = None,
    delays: Optional[dict[str, float]] = None,
    statuses: Optional[dict[str, int]] = None,
) -> web.Application:
    """Build a site from ``path -> body markup``, counting hits per path."""
    app = web.Application()
    delays = delays or {}
    statuses = statuses or {}

    def make_handler(path: str, body: str):
        async def handler(_):
            if hits is not None:
                hits[path] += 1
            if path in delays:
                await asyncio.sleep(delays[path])
            return html_response(body, status=statuses.get(path, 200))

        return handler

    for path, body in pages.items():
        app.router.add_get(path, make_handler(path, body))
    return app
