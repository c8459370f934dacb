"""
Data models for the DocScout crawler.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple

from doc_scout.errors import ScoutError


@dataclass(slots=True, frozen=True)
class LinkCandidate:
    """Absolute outbound link with its heuristic relevance score."""

    url: str
    text: str
    relevance: float = 0.0


@dataclass(slots=True, frozen=True)
class PageResult:
    """Cleaned content of one successfully explored page."""

    url: str
    content: str
    title: Optional[str] = None
    links: Tuple[LinkCandidate, ...] = ()


@dataclass(slots=True)
class ExplorationResult:
    """Aggregate answer for one top-level request."""

    root_url: str
    exploration_depth: int
    content: list[PageResult] = field(default_factory=list)
    error: Optional[str] = None
    is_error: bool = False

    @property
    def pages_explored(self) -> int:
        return len(self.content)


@dataclass(slots=True, frozen=True)
class RawPage:
    """Markup as returned by one of the fetchers, before extraction."""

    url: str
    html: str
    title: Optional[str] = None
    rendered: bool = False


class FetchStatus(enum.Enum):
    SUCCESS = "success"
    RETRYABLE = "retryable"
    FATAL = "fatal"


@dataclass(slots=True, frozen=True)
class FetchOutcome:
    """
    Tagged fetch result: a page on success, otherwise the classified error.

    A RETRYABLE outcome may still carry the page that was received, for the
    case where it is readable but a rendered copy would likely be richer.
    """

    status: FetchStatus
    page: Optional[RawPage] = None
    error: Optional[ScoutError] = None

    @classmethod
    def success(cls, page: RawPage) -> FetchOutcome:
        return cls(FetchStatus.SUCCESS, page=page)

    @classmethod
    def retryable(cls, error: ScoutError, page: Optional[RawPage] = None) -> FetchOutcome:
        return cls(FetchStatus.RETRYABLE, page=page, error=error)

    @classmethod
    def fatal(cls, error: ScoutError) -> FetchOutcome:
        return cls(FetchStatus.FATAL, error=error)

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.SUCCESS and self.page is not None
