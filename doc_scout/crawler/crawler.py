from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from doc_scout.config import ExplorerConfig
from doc_scout.crawler.deadline import Deadline
from doc_scout.crawler.link_extractor import filter_boilerplate, rank_links
from doc_scout.crawler.models import PageResult, RawPage
from doc_scout.crawler.strategy import FetchStrategySelector
from doc_scout.errors import DeadlineExceeded, ScoutError
from doc_scout.logger import get_logger
from doc_scout.parser.html_parser import parse_html
from doc_scout.utils import extract_host, normalize_url

__all__ = ("VisitedSet", "ExplorationState", "FrontierWalker")

log = get_logger("crawler")


class VisitedSet:
    """
    URLs fetched or in flight during one request.

    :meth:`claim` tests and inserts without suspending, so two branches racing
    for the same URL on the event loop cannot both win.
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()

    def claim(self, url: str) -> bool:
        key = normalize_url(url)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and normalize_url(url) in self._seen

    def __len__(self) -> int:
        return len(self._seen)


@dataclass(slots=True)
class ExplorationState:
    """Per-request traversal state; never shared between requests."""

    root_url: str
    max_depth: int
    visited: VisitedSet = field(default_factory=VisitedSet)
    #: pages in completion order, kept for partial results on timeout
    completed: List[PageResult] = field(default_factory=list)
    #: hosts recursion may follow: the requested root and wherever it redirected
    scope_hosts: Set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.scope_hosts.add(extract_host(self.root_url))

    def in_scope(self, url: str) -> bool:
        host = extract_host(url)
        return bool(host) and host in self.scope_hosts


def _chunks(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class FrontierWalker:
    """Depth-first, breadth-limited same-domain explorer with bounded concurrency."""

    def __init__(
        self,
        selector: FetchStrategySelector,
        config: ExplorerConfig,
        deadline: Optional[Deadline] = None,
    ) -> None:
        self.selector = selector
        self.config = config
        self.deadline = deadline
        self._slots = asyncio.Semaphore(config.max_in_flight)
        self.peak_in_flight = 0
        self._in_flight = 0

    async def explore(
        self, root_url: str, max_depth: int, state: Optional[ExplorationState] = None
    ) -> List[PageResult]:
        """
        Explore from *root_url*; ``max_depth=1`` fetches the root only.

        Errors on the root page propagate; errors on any other page drop that
        branch and leave its siblings running. :class:`DeadlineExceeded`
        always propagates.
        """
        state = state or ExplorationState(root_url, max_depth)
        return await self._walk(root_url, 0, state, is_root=True)

    async def _walk(self, url: str, depth: int, state: ExplorationState, is_root: bool = False) -> List[PageResult]:
        if depth >= state.max_depth or not state.visited.claim(url):
            return []
        log.info("Fetching %s (depth %d/%d)", url, depth, state.max_depth)
        try:
            page, raw = await self._visit(url)
        except DeadlineExceeded:
            raise
        except ScoutError as exc:
            if is_root:
                raise
            log.warning("Skipping %s: %s", url, exc)
            return []
        except Exception:
            if is_root:
                raise
            log.warning("Skipping %s after unexpected error", url, exc_info=True)
            return []

        if raw.url != url:
            # a redirect target is the same page
            state.visited.claim(raw.url)
            if is_root:
                state.scope_hosts.add(extract_host(raw.url))
        state.completed.append(page)
        results = [page]
        if depth + 1 >= state.max_depth:
            return results

        for group in _chunks(self._children(page, state), self.config.fan_out):
            branches = await asyncio.gather(
                *(self._walk(child, depth + 1, state) for child in group), return_exceptions=True
            )
            for branch in branches:
                if isinstance(branch, BaseException):
                    raise branch
                results.extend(branch)
        return results

    async def _visit(self, url: str) -> Tuple[PageResult, RawPage]:
        if self.deadline is not None:
            self.deadline.check(url)
        async with self._slots:
            self._in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self._in_flight)
            try:
                # in-flight fetches are cancelled by the engine when the deadline fires
                raw = await self.selector.fetch(url)
            finally:
                self._in_flight -= 1

        log.debug("Fetched %s via %s", url, "browser" if raw.rendered else "http")
        parsed = parse_html(
            raw,
            max_length=self.config.max_content_length,
            min_main_length=self.config.min_main_content_length,
        )
        links = rank_links(filter_boilerplate(parsed.links), self.config.max_links)
        return PageResult(url=url, title=parsed.title, content=parsed.text, links=tuple(links)), raw

    def _children(self, page: PageResult, state: ExplorationState) -> List[str]:
        """Best in-scope links of *page* nobody has claimed yet."""
        children: List[str] = []
        for link in page.links:
            if len(children) >= self.config.max_children:
                break
            if not state.in_scope(link.url):
                continue
            if link.url in state.visited or link.url in children:
                continue
            children.append(link.url)
        return children
