from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Set, Tuple

from a11y_scout.crawler.link_extractor import filter_links, normalize_url
from a11y_scout.crawler.models import (
    BrowserSession,
    FrontierEntry,
    PageAuditor,
    PageAuditResult,
    PageHandle,
    SessionProvider,
)
from a11y_scout.errors import InvalidInput, PageError

__all__ = ("AsyncCrawler", "crawl")


class _CrawlState:
    """Состояние одного обхода: фронтир, посещённые URL и результаты."""

    __slots__ = ("frontier", "visited", "seen", "results", "depths", "edges", "lock")

    def __init__(self, seed: str) -> None:
        self.frontier: Deque[FrontierEntry] = deque([FrontierEntry(seed, 0)])
        self.visited: Set[str] = set()
        self.seen: Set[str] = {seed}
        self.results: List[PageAuditResult] = []
        self.depths: Dict[str, int] = {}
        self.edges: List[Tuple[str, str]] = []
        self.lock = asyncio.Lock()


class AsyncCrawler:
    """
    Пакетный обход в ширину с аудитом каждой страницы.

    Страницы обрабатываются пачками по ``concurrency`` штук; следующая пачка
    формируется только после завершения предыдущей. Ошибка на отдельной
    странице записывается в лог и не прерывает обход.
    """

    def __init__(
        self,
        provider: SessionProvider,
        auditor: PageAuditor,
        *,
        max_depth: int = 2,
        max_pages: int = 10,
        concurrency: int = 3,
        navigation_timeout: float = 30.0,
        settle_delay: float = 2.0,
        max_links_per_page: int = 10,
    ) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        if max_pages < 1:
            raise ValueError("max_pages must be >= 1")
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if navigation_timeout <= 0:
            raise ValueError("navigation_timeout must be > 0")
        if settle_delay < 0:
            raise ValueError("settle_delay must be >= 0")
        if max_links_per_page < 1:
            raise ValueError("max_links_per_page must be >= 1")
        self.provider = provider
        self.auditor = auditor
        self.max_depth = max_depth
        self.max_pages = max_pages
        self.concurrency = concurrency
        self.navigation_timeout = navigation_timeout
        self.settle_delay = settle_delay
        self.max_links_per_page = max_links_per_page
        self.logger = logging.getLogger("A11yScout")
        # graph of the most recent crawl, for diagnostics
        self.last_depths: Dict[str, int] = {}
        self.last_edges: List[Tuple[str, str]] = []

    @classmethod
    def from_config(cls, config: Any, provider: SessionProvider, auditor: PageAuditor) -> AsyncCrawler:
        return cls(
            provider,
            auditor,
            max_depth=config.max_depth,
            max_pages=config.max_pages,
            concurrency=config.concurrency,
            navigation_timeout=config.navigation_timeout,
            settle_delay=config.settle_delay,
            max_links_per_page=config.max_links_per_page,
        )

    async def crawl(self, seed_url: str) -> List[PageAuditResult]:
        """Обходит сайт от *seed_url* и возвращает результаты в порядке завершения."""
        if not seed_url or not isinstance(seed_url, str):
            raise InvalidInput("seed URL is required")
        try:
            seed = normalize_url(seed_url)
        except ValueError as exc:
            raise InvalidInput(str(exc)) from exc

        self.logger.info(
            "Старт обхода: %s (depth<=%d, pages<=%d, concurrency=%d)",
            seed, self.max_depth, self.max_pages, self.concurrency,
        )
        start = time.monotonic()
        state = _CrawlState(seed)
        try:
            async with self.provider.open() as session:
                while state.frontier and len(state.results) < self.max_pages:
                    batch = self._next_batch(state)
                    await asyncio.gather(*(self._visit(session, entry, state) for entry in batch))
        finally:
            self.last_depths = dict(state.depths)
            self.last_edges = list(state.edges)

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц из %d посещённых за %.2f с",
            len(state.results), len(state.visited), duration,
        )
        if state.frontier:
            self.logger.debug("Лимит страниц достигнут, отброшено в очереди: %d", len(state.frontier))
        return list(state.results)

    def _next_batch(self, state: _CrawlState) -> List[FrontierEntry]:
        size = min(self.concurrency, self.max_pages - len(state.results))
        batch: List[FrontierEntry] = []
        while state.frontier and len(batch) < size:
            batch.append(state.frontier.popleft())
        return batch

    async def _visit(self, session: BrowserSession, entry: FrontierEntry, state: _CrawlState) -> None:
        async with state.lock:
            if entry.url in state.visited or entry.depth > self.max_depth:
                return
            if len(state.results) >= self.max_pages:
                return
            state.visited.add(entry.url)
            state.depths[entry.url] = entry.depth

        self.logger.info("Сканирование %s (depth %d)", entry.url, entry.depth)
        page: Optional[PageHandle] = None
        try:
            page = await session.new_page()
            await asyncio.wait_for(
                page.navigate(entry.url, self.navigation_timeout), timeout=self.navigation_timeout
            )
            if self.settle_delay:
                await asyncio.sleep(self.settle_delay)
            raw = await self.auditor.analyze(page)

            result = PageAuditResult(entry.url, raw)
            async with state.lock:
                state.results.append(result)
            self.logger.info("Готово %s: нарушений %d", entry.url, len(result.violations))

            if entry.depth < self.max_depth:
                await self._discover(page, entry, state)
        except asyncio.TimeoutError:
            self.logger.warning("Failed to scan %s: navigation timed out after %.1f s", entry.url, self.navigation_timeout)
        except PageError as exc:
            self.logger.warning("Failed to scan %s: %s", entry.url, exc)
        except Exception as exc:
            self.logger.warning("Failed to scan %s: %s: %s", entry.url, type(exc).__name__, exc)
        finally:
            if page is not None:
                try:
                    await page.close()
                except Exception as exc:
                    self.logger.debug("Closing page %s failed: %s", entry.url, exc)

    async def _discover(self, page: PageHandle, entry: FrontierEntry, state: _CrawlState) -> None:
        try:
            hrefs = await page.extract_links()
        except Exception as exc:
            self.logger.warning("Link extraction failed on %s: %s", entry.url, exc)
            return

        links = filter_links(hrefs, self.max_links_per_page)
        queued = 0
        async with state.lock:
            for link in links:
                try:
                    normalized = normalize_url(link)
                except ValueError:
                    continue
                state.edges.append((entry.url, normalized))
                if normalized in state.seen or len(state.results) >= self.max_pages:
                    continue
                state.seen.add(normalized)
                state.frontier.append(FrontierEntry(normalized, entry.depth + 1))
                queued += 1
        self.logger.debug("%s: %d ссылок найдено, %d в очередь", entry.url, len(links), queued)


async def crawl(
    seed_url: str,
    max_depth: int,
    max_pages: int,
    concurrency: int,
    auditor: PageAuditor,
    provider: SessionProvider,
    **options: Any,
) -> List[PageAuditResult]:
    """Run one crawl with a throwaway :class:`AsyncCrawler`."""
    crawler = AsyncCrawler(
        provider,
        auditor,
        max_depth=max_depth,
        max_pages=max_pages,
        concurrency=concurrency,
        **options,
    )
    return await crawler.crawl(seed_url)
