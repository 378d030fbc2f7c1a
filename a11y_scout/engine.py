# File: a11y_scout/engine.py
"""a11y_scout.engine: сессия сканирования - обход, декодирование, оценка, сохранение."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from a11y_scout.aggregator import PageSummary, aggregate_results
from a11y_scout.audit.scoring import ImpactCounts, score
from a11y_scout.config import ScannerConfig
from a11y_scout.crawler.crawler import AsyncCrawler
from a11y_scout.crawler.models import PageAuditor, SessionProvider
from a11y_scout.errors import A11yScoutError, UserNotFound
from a11y_scout.logger import logger
from a11y_scout.storage import STATUS_FAILED, STATUS_SUCCESS, ResultStore, ScannedWebsite, UserStore
from a11y_scout.utils import normalize_email, validate_scan_input

__all__ = [
    "Engine",
    "ScanOutcome",
    "OUTCOME_SUCCESS",
    "OUTCOME_NO_RESULTS",
    "OUTCOME_INVALID_INPUT",
    "OUTCOME_ERROR",
    "NO_RESULTS_MESSAGE",
]

OUTCOME_SUCCESS = "success"
OUTCOME_NO_RESULTS = "no_results"
OUTCOME_INVALID_INPUT = "invalid_input"
OUTCOME_ERROR = "error"

SUCCESS_MESSAGE = "Scan completed & summaries saved"
NO_RESULTS_MESSAGE = "No scan results. Website may block headless browsers."


@dataclass(frozen=True, slots=True)
class ScanOutcome:
    """Итог одного сканирования; не изменяется после возврата."""

    success: bool
    message: str
    status: str
    website: Optional[ScannedWebsite] = None
    pages: Tuple[PageSummary, ...] = ()
    counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    score: Optional[float] = None

    @classmethod
    def failure(cls, status: str, message: str, website: Optional[ScannedWebsite] = None) -> ScanOutcome:
        return cls(success=False, message=message, status=status, website=website)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "status": self.status,
        }
        if self.website is not None:
            data["scannedWebsite"] = {
                "id": self.website.id,
                "url": self.website.url,
                "date": self.website.created_at.isoformat(),
            }
        if self.success:
            data["summarizedReport"] = copy.deepcopy(list(self.pages))
            data["summary"] = {**self.counts, "score": self.score}
        return data


class Engine:
    """Связывает краулер, декодер, оценку и хранилища в одну операцию."""

    def __init__(
        self,
        config: ScannerConfig,
        users: UserStore,
        results: ResultStore,
        provider: SessionProvider,
        auditor: PageAuditor,
    ) -> None:
        self.config = config
        self.users = users
        self.results = results
        self.provider = provider
        self.auditor = auditor

    @staticmethod
    def reject_input(seed_url: str, requester_email: str) -> Optional[ScanOutcome]:
        """Неуспешный итог для неверного URL или e-mail, иначе None."""
        problem = validate_scan_input(seed_url, requester_email)
        if problem is None:
            return None
        logger.warning("Scan rejected: %s", problem)
        return ScanOutcome.failure(OUTCOME_INVALID_INPUT, problem)

    async def perform_scan(self, seed_url: str, requester_email: str) -> ScanOutcome:
        """
        Сканирует сайт от имени пользователя.

        Неверный ввод и пустой обход возвращаются как неуспешный ScanOutcome.
        UserNotFound, AuditorLoadError, BrowserLaunchError и StorageError
        пробрасываются вызывающему.
        """
        rejected = self.reject_input(seed_url, requester_email)
        if rejected is not None:
            return rejected

        url = seed_url.strip()
        email = normalize_email(requester_email)
        logger.info("Starting website scan for %s, user %s", url, email)

        user = await self.users.find_by_email(email)
        if user is None:
            raise UserNotFound(email)

        await self.auditor.prepare()
        crawler = AsyncCrawler.from_config(self.config, self.provider, self.auditor)
        pages = await crawler.crawl(url)

        if not pages:
            website = await self.results.save_scan(user.id, url, STATUS_FAILED)
            await self.results.save_report(website.id, url, STATUS_FAILED, None)
            logger.warning("No pages audited for %s", url)
            return ScanOutcome.failure(OUTCOME_NO_RESULTS, NO_RESULTS_MESSAGE, website)

        website = await self.results.save_scan(user.id, url, STATUS_SUCCESS)
        report = aggregate_results(pages)
        for page in report.pages:
            await self.results.save_report(website.id, page["url"], STATUS_SUCCESS, page["issues"])

        value = self.score(report.counts)
        await self.results.save_stats(website.id, report.counts, value)
        logger.info(
            "Scan completed for %s: %d pages, %d issues, score %.1f",
            url, len(report.pages), report.counts.total_issues, value,
        )
        return ScanOutcome(
            success=True,
            message=SUCCESS_MESSAGE,
            status=OUTCOME_SUCCESS,
            website=website,
            pages=tuple(copy.deepcopy(report.pages)),
            counts=MappingProxyType(report.counts.as_dict()),
            score=value,
        )

    def score(self, counts: ImpactCounts) -> float:
        return score(
            counts,
            baseline=self.config.score_baseline,
            max_weight=self.config.score_max_weight,
        )

    async def run_scan(self, seed_url: str, requester_email: str) -> ScanOutcome:
        """Как perform_scan, но ошибки A11yScout превращаются в неуспешный итог."""
        try:
            return await self.perform_scan(seed_url, requester_email)
        except A11yScoutError as exc:
            logger.error("Scan failed: %s", exc)
            return ScanOutcome.failure(OUTCOME_ERROR, str(exc))
