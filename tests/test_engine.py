# File: tests/test_engine.py
# Deadline guard and top-level error semantics
from __future__ import annotations

import asyncio
import time
from urllib.parse import urlsplit

import pytest
from aiohttp import web

from doc_scout.config import ExplorerConfig
from doc_scout.engine import Engine
from doc_scout.report.json_report import to_dict
from helpers import FakeRendered, html_response, make_app, serve_app

#: the hanging handler outlives every deadline used below
HANG: float = 3.0


@pytest.mark.asyncio()
async def test_successful_exploration(config, unused_tcp_port: int):
    app = make_app(
        {
            "/": '<a href="/guide">Getting started guide</a><a href="https://elsewhere.invalid/">Elsewhere</a>',
            "/guide": "<p>Install, configure, run.</p>",
        }
    )
    async for base in serve_app(app, unused_tcp_port):
        result = await Engine(config).explore_async(base, 2)

    assert result.error is None
    assert not result.is_error
    assert result.pages_explored == 2
    data = to_dict(result)
    assert data["rootUrl"] == base
    assert data["explorationDepth"] == 2
    assert data["pagesExplored"] == 2
    assert data["content"][1]["title"] == "guide"
    assert "error" not in data and "isError" not in data


@pytest.mark.asyncio()
async def test_root_that_never_answers_times_out(unused_tcp_port: int):
    config = ExplorerConfig(deadline=0.5, http_timeout=10.0, render_fallback=False)
    app = web.Application()

    async def hang(_):
        await asyncio.sleep(HANG)
        return html_response("<p>too late</p>")

    app.router.add_get("/", hang)
    async for base in serve_app(app, unused_tcp_port):
        start = time.perf_counter()
        result = await Engine(config).explore_async(base, 3)
        elapsed = time.perf_counter() - start

    assert elapsed < 2.0
    assert result.pages_explored == 0
    assert result.error and "timed out" in result.error
    assert not result.is_error


@pytest.mark.asyncio()
async def test_timeout_keeps_completed_pages(unused_tcp_port: int):
    config = ExplorerConfig(deadline=0.8, render_fallback=False)
    app = make_app(
        {
            "/": '<a href="/fast">Fast chapter</a><a href="/slow">Slow chapter</a>',
            "/fast": "<p>Quick answer</p>",
            "/slow": "<p>Never arrives in time</p>",
        },
        delays={"/slow": HANG},
    )
    async for base in serve_app(app, unused_tcp_port):
        result = await Engine(config).explore_async(base, 2)

    assert result.error and "timed out" in result.error
    assert not result.is_error
    assert sorted(urlsplit(p.url).path for p in result.content) == ["", "/fast"]
    assert result.pages_explored == 2


@pytest.mark.asyncio()
@pytest.mark.parametrize("url", ["not a url", "ftp://example.com/file", "http://", "/relative/path", ""])
async def test_invalid_url_is_hard_failure(config, url: str):
    result = await Engine(config).explore_async(url, 1)
    assert result.is_error
    assert result.pages_explored == 0
    assert "Invalid URL" in result.error
    assert to_dict(result)["isError"] is True


@pytest.mark.asyncio()
async def test_unfetchable_root_is_hard_failure(config, unused_tcp_port: int):
    rendered = FakeRendered()
    app = make_app({"/": "<p>gone</p>"}, statuses={"/": 503})
    async for base in serve_app(app, unused_tcp_port):
        result = await Engine(config, rendered=rendered).explore_async(base, 2)

    assert result.is_error
    assert result.content == []
    assert result.error.startswith("Error fetching content")
    # lightweight 503 is retryable, so the renderer was tried too
    assert rendered.calls == [base]


@pytest.mark.asyncio()
async def test_rendered_fallback_for_root(config, unused_tcp_port: int):
    app = web.Application()

    async def shell(_):
        return web.Response(
            text='<html><body><div id="app"></div><script src="/app.js"></script></body></html>',
            content_type="text/html",
        )

    app.router.add_get("/", shell)
    async for base in serve_app(app, unused_tcp_port):
        rendered = FakeRendered({base: "<html><body><article>Rendered docs body</article></body></html>"})
        result = await Engine(config, rendered=rendered).explore_async(base, 1)

    assert result.error is None
    assert [p.content for p in result.content] == ["Rendered docs body"]


@pytest.mark.asyncio()
async def test_short_scripted_page_accepted_without_renderer(unused_tcp_port: int):
    config = ExplorerConfig(http_timeout=2.0, render_fallback=False)
    app = make_app({"/": "<p>Release notes: v2 ships today.</p><script>ga('send')</script>"})
    async for base in serve_app(app, unused_tcp_port):
        result = await Engine(config).explore_async(base, 1)

    assert result.error is None
    assert not result.is_error
    assert [p.content for p in result.content] == ["Release notes: v2 ships today."]


@pytest.mark.asyncio()
async def test_requests_do_not_share_state(config, unused_tcp_port: int):
    app = make_app({"/": '<a href="/a">Alpha chapter</a>', "/a": "<p>Alpha</p>"})
    async for base in serve_app(app, unused_tcp_port):
        engine = Engine(config)
        first, second = await asyncio.gather(engine.explore_async(base, 2), engine.explore_async(base, 2))
    assert first.pages_explored == second.pages_explored == 2


def test_sync_explore_wraps_event_loop(config):
    result = Engine(config).explore("mailto:someone@example.com", 1)
    assert result.is_error
