# File: doc_scout/engine.py
"""doc_scout.engine: точка входа обхода с глобальным дедлайном и частичными результатами."""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from typing import Optional

from aiohttp import ClientSession

from doc_scout.config import ExplorerConfig
from doc_scout.crawler.crawler import ExplorationState, FrontierWalker
from doc_scout.crawler.deadline import Deadline
from doc_scout.crawler.fetcher import LightweightFetcher, default_headers
from doc_scout.crawler.models import ExplorationResult
from doc_scout.crawler.renderer import BrowserManager, RenderedFetcher
from doc_scout.crawler.strategy import FetchStrategySelector, PageFetcher
from doc_scout.errors import DeadlineExceeded, ScoutError
from doc_scout.logger import logger
from doc_scout.utils import ensure_valid_url

__all__ = ["Engine", "explore", "explore_async"]


class Engine:
    """Фасад для CLI и тестов: один вызов explore() = один независимый обход."""

    def __init__(self, config: Optional[ExplorerConfig] = None, *, rendered: Optional[PageFetcher] = None) -> None:
        """
        rendered: готовый fetcher для рендеринга (подменяется в тестах).
        Без него при render_fallback=True на каждый запрос создаётся свой браузер.
        """
        self.config = config or ExplorerConfig()
        self._rendered = rendered

    async def explore_async(self, url: str, depth: int = 1) -> ExplorationResult:
        """Обходит url до глубины depth; ошибки возвращаются в поле error, а не исключением."""
        result = ExplorationResult(root_url=url, exploration_depth=depth)
        state: Optional[ExplorationState] = None
        try:
            root = ensure_valid_url(url)
            deadline = Deadline(self.config.deadline)
            state = ExplorationState(root, depth)
            logger.info("Exploring %s (depth %d, deadline %.0fs)", root, depth, self.config.deadline)
            async with AsyncExitStack() as stack:
                selector = await self._build_selector(stack)
                walker = FrontierWalker(selector, self.config, deadline)
                result.content = await asyncio.wait_for(
                    walker.explore(root, depth, state), timeout=deadline.remaining()
                )
        except (asyncio.TimeoutError, DeadlineExceeded):
            gathered = list(state.completed) if state is not None else []
            result.content = gathered
            result.error = (
                f"Exploration timed out after {self.config.deadline:.0f} seconds; "
                f"returning {len(gathered)} page(s) gathered so far"
            )
            logger.warning("Exploration of %s timed out with %d page(s)", url, len(gathered))
        except ScoutError as exc:
            result.error = f"Error fetching content: {exc}"
            result.is_error = True
            logger.error("Exploration of %s failed: %s", url, exc)
        except Exception as exc:
            result.error = f"Error fetching content: {exc}"
            result.is_error = True
            logger.exception("Unexpected failure while exploring %s", url)
        else:
            logger.info("Explored %s: %d page(s)", url, result.pages_explored)
        return result

    async def _build_selector(self, stack: AsyncExitStack) -> FetchStrategySelector:
        """Открывает ресурсы запроса в stack: они закрываются при успехе, ошибке и таймауте."""
        session = await stack.enter_async_context(
            ClientSession(headers=default_headers(self.config.user_agent))
        )
        rendered: Optional[PageFetcher] = self._rendered
        if rendered is None and self.config.render_fallback:
            manager = await stack.enter_async_context(BrowserManager(self.config))
            rendered = RenderedFetcher(manager, self.config)
        return FetchStrategySelector(LightweightFetcher(session, self.config), rendered)

    def explore(self, url: str, depth: int = 1) -> ExplorationResult:
        """Синхронная обёртка над explore_async()."""
        return asyncio.run(self.explore_async(url, depth))


async def explore_async(url: str, depth: int = 1, config: Optional[ExplorerConfig] = None) -> ExplorationResult:
    return await Engine(config).explore_async(url, depth)


def explore(url: str, depth: int = 1, config: Optional[ExplorerConfig] = None) -> ExplorationResult:
    """Обходит url и его окрестность в пределах домена; всегда возвращает ExplorationResult."""
    return Engine(config).explore(url, depth)
