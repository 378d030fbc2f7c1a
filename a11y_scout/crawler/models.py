# a11y_scout/crawler/models.py
"""
Data models and collaborator interfaces for the A11yScout crawler.

The crawler itself never talks to a browser or to axe-core directly: it is
handed a :class:`SessionProvider` and a :class:`PageAuditor` and works only
through the protocols below.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncContextManager, List, Mapping, Protocol, runtime_checkable

__all__ = [
    "FrontierEntry",
    "PageAuditResult",
    "PageHandle",
    "BrowserSession",
    "SessionProvider",
    "PageAuditor",
]


@dataclass(frozen=True, slots=True)
class FrontierEntry:
    """A URL waiting in the frontier together with its hop count from the seed."""

    url: str
    depth: int


@dataclass(frozen=True, slots=True)
class PageAuditResult:
    """Raw audit output of one successfully audited page."""

    url: str
    result: Mapping[str, Any]

    @property
    def violations(self) -> List[Mapping[str, Any]]:
        raw = self.result.get("violations", []) if isinstance(self.result, Mapping) else []
        return list(raw) if isinstance(raw, (list, tuple)) else []


@runtime_checkable
class PageHandle(Protocol):
    """One loaded browser tab."""

    async def navigate(self, url: str, timeout: float) -> None:
        """Load *url*; raise NavigationError on timeout or network failure."""

    async def extract_links(self) -> List[str]:
        """Return the ``href`` of every anchor on the page, resolved to absolute form."""

    async def close(self) -> None: ...


@runtime_checkable
class BrowserSession(Protocol):
    """A running browser shared by every page visit of one crawl."""

    async def new_page(self) -> PageHandle:
        """Open a fresh tab; raise SessionError on failure."""

    async def close(self) -> None: ...


@runtime_checkable
class SessionProvider(Protocol):
    def open(self) -> AsyncContextManager[BrowserSession]:
        """Start a browser; the context manager closes it exactly once."""


@runtime_checkable
class PageAuditor(Protocol):
    async def prepare(self) -> None:
        """Load the accessibility engine once per scan; raise AuditorLoadError on failure."""

    async def analyze(self, page: PageHandle) -> Mapping[str, Any]:
        """Run the accessibility engine on a loaded page; raise AuditError on failure."""
