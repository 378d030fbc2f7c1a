# File: tests/conftest.py
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional

import pytest
import pytest_asyncio

from a11y_scout.config import ScannerConfig
from a11y_scout.errors import AuditError, AuditorLoadError, BrowserLaunchError, NavigationError, SessionError
from a11y_scout.storage import SqlStore

SEED = "https://example.com/"


def violation(rule_id: str, impact: Optional[str], nodes: int = 1) -> Dict[str, Any]:
    """Build one axe-style violation entry with *nodes* failing nodes."""
    return {
        "id": rule_id,
        "impact": impact,
        "description": f"{rule_id} description",
        "help": f"{rule_id} help",
        "helpUrl": f"https://dequeuniversity.com/rules/axe/4.10/{rule_id}",
        "nodes": [
            {"html": f"<div id='n{i}'></div>", "target": [f"#n{i}"], "failureSummary": "Fix this"}
            for i in range(nodes)
        ],
    }


@dataclass
class FakePageSpec:
    """How a URL behaves in the fake browser."""

    links: List[str] = field(default_factory=list)
    violations: List[Dict[str, Any]] = field(default_factory=list)
    delay: float = 0.0
    fail: Optional[str] = None  # "navigate" | "audit" | "links"


class FakePage:
    def __init__(self, browser: FakeBrowser) -> None:
        self.browser = browser
        self.url: Optional[str] = None
        self.closed = False

    @property
    def spec(self) -> FakePageSpec:
        return self.browser.site[self.url]

    async def navigate(self, url: str, timeout: float) -> None:
        self.browser.navigations.append(url)
        if url not in self.browser.site:
            raise NavigationError("net::ERR_NAME_NOT_RESOLVED", url)
        self.url = url
        if self.spec.delay:
            await asyncio.sleep(self.spec.delay)
        if self.spec.fail == "navigate":
            raise NavigationError("net::ERR_CONNECTION_RESET", url)

    async def extract_links(self) -> List[str]:
        self.browser.link_calls.append(self.url)
        if self.spec.fail == "links":
            raise RuntimeError("Execution context was destroyed")
        return list(self.spec.links)

    async def close(self) -> None:
        self.closed = True
        self.browser.closed_pages += 1


class FakeSession:
    def __init__(self, browser: FakeBrowser) -> None:
        self.browser = browser

    async def new_page(self) -> FakePage:
        if self.browser.fail_new_page:
            raise SessionError("Target closed")
        self.browser.opened_pages += 1
        return FakePage(self.browser)

    async def close(self) -> None:
        self.browser.session_closed += 1


class FakeBrowser:
    """Session provider over an in-memory site map."""

    def __init__(self, site: Dict[str, FakePageSpec]) -> None:
        self.site = site
        self.sessions_opened = 0
        self.session_closed = 0
        self.opened_pages = 0
        self.closed_pages = 0
        self.navigations: List[str] = []
        self.link_calls: List[Optional[str]] = []
        self.fail_launch = False
        self.fail_new_page = False

    @asynccontextmanager
    async def open(self) -> AsyncIterator[FakeSession]:
        if self.fail_launch:
            raise BrowserLaunchError("cannot launch browser")
        self.sessions_opened += 1
        session = FakeSession(self)
        try:
            yield session
        finally:
            await session.close()


class FakeAuditor:
    """Returns the violations of the site map; records concurrency."""

    def __init__(self, *, always_fail: bool = False, delay: float = 0.0, fail_load: bool = False) -> None:
        self.always_fail = always_fail
        self.delay = delay
        self.fail_load = fail_load
        self.prepared = 0
        self.calls: Dict[str, int] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    async def prepare(self) -> None:
        if self.fail_load:
            raise AuditorLoadError("cannot load axe-core: bundle missing")
        self.prepared += 1

    async def analyze(self, page: FakePage) -> Dict[str, Any]:
        self.calls[page.url] = self.calls.get(page.url, 0) + 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.always_fail or page.spec.fail == "audit":
                raise AuditError("axe not loaded", page.url)
            return {"url": page.url, "violations": list(page.spec.violations)}
        finally:
            self.in_flight -= 1


@pytest.fixture()
def make_site():
    """Factory: ``make_site({url: FakePageSpec})`` -> FakeBrowser."""
    return FakeBrowser


@pytest.fixture()
def auditor() -> FakeAuditor:
    return FakeAuditor()


@pytest.fixture()
def basic_config(tmp_path) -> ScannerConfig:
    """ScannerConfig for fast tests: no settle delay, short navigation timeout."""
    return ScannerConfig(
        max_depth=2,
        max_pages=10,
        concurrency=3,
        navigation_timeout=1.0,
        settle_delay=0,
        browser_path=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
    )


@pytest_asyncio.fixture
async def store(basic_config) -> AsyncIterator[SqlStore]:
    async with SqlStore(basic_config.database_url) as s:
        yield s
