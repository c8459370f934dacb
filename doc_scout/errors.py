"""
Error taxonomy shared by the fetchers, the frontier walker and the engine.

Every fetch-level failure is a :class:`ScoutError`; the walker turns those into
"this branch contributes nothing", the engine turns the ones that hit the root
page into an error response.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "ScoutError",
    "NetworkError",
    "HttpStatusError",
    "NonTextResponse",
    "RenderTimeout",
    "EmptyContent",
    "BrowserLaunchError",
    "InvalidUrl",
    "DeadlineExceeded",
)


class ScoutError(Exception):
    """Base class for all DocScout failures."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class NetworkError(ScoutError):
    """DNS, connection or transport-level timeout."""


class HttpStatusError(ScoutError):
    """Server answered with something other than 200."""

    def __init__(self, status: int, url: Optional[str] = None) -> None:
        super().__init__(f"HTTP {status}", url)
        self.status = status


class NonTextResponse(ScoutError):
    """Body is binary or has a non-textual content type."""


class RenderTimeout(ScoutError):
    """Headless navigation did not finish within its attempts."""


class EmptyContent(ScoutError):
    """Page loaded but carries no usable text."""


class BrowserLaunchError(ScoutError):
    """Rendering engine could not be started."""


class InvalidUrl(ScoutError):
    """URI is malformed or uses an unsupported scheme."""


class DeadlineExceeded(ScoutError):
    """Global time budget of a request ran out."""
