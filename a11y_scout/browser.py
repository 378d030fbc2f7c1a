# File: a11y_scout/browser.py
"""a11y_scout.browser: headless Chromium via Playwright and the axe-core auditor.

These are the default collaborators of :class:`~a11y_scout.crawler.AsyncCrawler`:

* :class:`PlaywrightProvider` starts one browser per crawl and hands out tabs;
* :class:`AxeAuditor` runs the axe-core bundled with ``axe-playwright-python``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from axe_playwright_python.async_playwright import Axe
from playwright.async_api import Browser, BrowserContext, Page, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from a11y_scout.config import ScannerConfig
from a11y_scout.crawler.link_extractor import extract_links
from a11y_scout.errors import AuditError, AuditorLoadError, BrowserLaunchError, NavigationError, SessionError

__all__ = ["PlaywrightPage", "PlaywrightSession", "PlaywrightProvider", "AxeAuditor"]

logger = logging.getLogger("A11yScout")


class PlaywrightPage:
    """Page handle over a Playwright tab."""

    def __init__(self, page: Page) -> None:
        self.page = page

    async def navigate(self, url: str, timeout: float) -> None:
        try:
            await self.page.goto(url, wait_until="networkidle", timeout=timeout * 1000)
        except PlaywrightTimeoutError as exc:
            raise NavigationError(f"navigation timed out after {timeout:.0f} s", url) from exc
        except PlaywrightError as exc:
            raise NavigationError(str(exc), url) from exc

    async def extract_links(self) -> List[str]:
        html = await self.page.content()
        return extract_links(html, self.page.url)

    async def close(self) -> None:
        if not self.page.is_closed():
            await self.page.close()


class PlaywrightSession:
    """One browser context shared by every tab of a crawl."""

    def __init__(self, browser: Browser, context: BrowserContext) -> None:
        self.browser = browser
        self.context = context

    async def new_page(self) -> PlaywrightPage:
        try:
            page = await self.context.new_page()
        except PlaywrightError as exc:
            raise SessionError(f"cannot open a new tab: {exc}") from exc
        return PlaywrightPage(page)

    async def close(self) -> None:
        await self.context.close()


class PlaywrightProvider:
    """Session provider: launches Chromium once per :meth:`open`."""

    def __init__(
        self,
        *,
        headless: bool = True,
        executable_path: Optional[str] = None,
        args: Sequence[str] = (),
        user_agent: Optional[str] = None,
        viewport: Optional[Dict[str, int]] = None,
    ) -> None:
        self.headless = headless
        self.executable_path = executable_path
        self.args = list(args)
        self.user_agent = user_agent
        self.viewport = viewport

    @classmethod
    def from_config(cls, config: ScannerConfig) -> PlaywrightProvider:
        return cls(
            headless=config.headless,
            executable_path=config.browser_path,
            args=config.browser_args,
            user_agent=config.user_agent,
            viewport={"width": config.viewport_width, "height": config.viewport_height},
        )

    @asynccontextmanager
    async def open(self) -> AsyncIterator[PlaywrightSession]:
        async with async_playwright() as pw:
            logger.info("Launching Chromium (%s)", self.executable_path or "bundled")
            try:
                browser = await pw.chromium.launch(
                    headless=self.headless,
                    executable_path=self.executable_path,
                    args=self.args,
                )
            except PlaywrightError as exc:
                raise BrowserLaunchError(f"cannot launch browser: {exc}") from exc
            try:
                context = await browser.new_context(
                    user_agent=self.user_agent,
                    viewport=self.viewport,
                    bypass_csp=True,
                )
                session = PlaywrightSession(browser, context)
                try:
                    yield session
                finally:
                    await session.close()
            finally:
                await browser.close()
                logger.info("Browser closed")


class AxeAuditor:
    """Page auditor over ``axe_playwright_python.async_playwright.Axe``.

    The axe-core script is read once, in :meth:`prepare`; a failure there is a
    scan-level :class:`AuditorLoadError`, not a per-page one.
    """

    def __init__(self, tags: Sequence[str], axe: Optional[Axe] = None) -> None:
        if not tags:
            raise ValueError("at least one axe tag is required")
        self.tags = list(tags)
        self._axe = axe

    @classmethod
    def from_config(cls, config: ScannerConfig) -> AxeAuditor:
        return cls(config.axe_tags)

    @property
    def options(self) -> Dict[str, Any]:
        return {
            "runOnly": {"type": "tag", "values": self.tags},
            "resultTypes": ["violations"],
        }

    async def prepare(self) -> None:
        if self._axe is not None:
            return
        try:
            self._axe = Axe()
        except OSError as exc:
            raise AuditorLoadError(f"cannot load axe-core: {exc}") from exc
        logger.debug("axe-core ready, tags: %s", ", ".join(self.tags))

    async def analyze(self, page: PlaywrightPage) -> Dict[str, Any]:
        await self.prepare()
        raw_page = page.page
        try:
            results = await self._axe.run(raw_page, options=self.options)
        except PlaywrightError as exc:
            raise AuditError(f"axe run failed: {exc}", raw_page.url) from exc
        response = getattr(results, "response", None)
        if not isinstance(response, dict):
            raise AuditError("unexpected axe result", raw_page.url)
        return response
