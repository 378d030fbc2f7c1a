# File: a11y_scout/aggregator.py
"""a11y_scout.aggregator: сводка нарушений по страницам и общие счётчики."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, TypedDict

from a11y_scout.audit.decoder import Violation, decode
from a11y_scout.audit.scoring import ImpactCounts
from a11y_scout.crawler.models import PageAuditResult


class IssueExample(TypedDict):
    """Пример узла DOM, на котором сработало правило."""

    element: str
    snippet: str
    problem: str


class IssueInfo(TypedDict):
    """Одно нарушение в виде, пригодном для хранения и отчётов."""

    id: str
    impact: str
    description: str
    help: str
    remediation: str
    examples: List[IssueExample]
    resources: List[str]


class PageSummary(TypedDict):
    """Нарушения одной страницы."""

    url: str
    issues: List[IssueInfo]


@dataclass(slots=True)
class ScanReport:
    """Сводки по страницам и накопленные счётчики одного сканирования."""

    pages: List[PageSummary] = field(default_factory=list)
    counts: ImpactCounts = field(default_factory=ImpactCounts)


def summarize_page(url: str, violations: Sequence[Violation]) -> PageSummary:
    """Преобразует декодированные нарушения страницы в PageSummary."""
    issues: List[IssueInfo] = []
    for v in violations:
        issues.append(
            {
                "id": v.rule_id,
                "impact": v.impact.value,
                "description": v.description,
                "help": v.help_text,
                "remediation": v.remediation,
                "examples": [
                    {"element": n.html, "snippet": n.html, "problem": n.failure_summary}
                    for n in v.affected_nodes
                ],
                "resources": list(v.reference_links),
            }
        )
    return {"url": url, "issues": issues}


def aggregate_results(raw_results: Sequence[PageAuditResult]) -> ScanReport:
    """Декодирует каждую страницу и собирает ScanReport со счётчиками."""
    report = ScanReport()
    for page in raw_results:
        violations = decode(page.result, page.url)
        report.counts.add_violations(violations)
        report.pages.append(summarize_page(page.url, violations))
    return report
