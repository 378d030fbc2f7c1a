# File: a11y_scout/audit/scoring.py
"""Aggregate impact counts and the 0-100 accessibility score."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Union

from a11y_scout.audit.decoder import ImpactLevel, Violation

__all__ = ["IMPACT_WEIGHTS", "DEFAULT_BASELINE", "DEFAULT_MAX_WEIGHT", "ImpactCounts", "penalty", "score"]

IMPACT_WEIGHTS: Mapping[ImpactLevel, int] = {
    ImpactLevel.CRITICAL: 5,
    ImpactLevel.SERIOUS: 3,
    ImpactLevel.MODERATE: 2,
    ImpactLevel.MINOR: 1,
    ImpactLevel.NONE: 0,
}

#: audit units added to the issue total so the denominator is never zero
DEFAULT_BASELINE = 10
#: weight of the most severe level, normalizes the penalty to 0..1
DEFAULT_MAX_WEIGHT = 5


@dataclass(slots=True)
class ImpactCounts:
    """Issue counts per impact level, accumulated page by page."""

    counts: Dict[ImpactLevel, int] = field(default_factory=lambda: {level: 0 for level in ImpactLevel})

    @classmethod
    def from_mapping(cls, data: Mapping[Union[str, ImpactLevel], int]) -> ImpactCounts:
        result = cls()
        for key, value in data.items():
            result.add(ImpactLevel(key), int(value))
        return result

    def add(self, level: ImpactLevel, amount: int = 1) -> None:
        if amount < 0:
            raise ValueError("amount must be >= 0")
        self.counts[level] = self.counts.get(level, 0) + amount

    def add_violations(self, violations: Iterable[Violation]) -> None:
        for v in violations:
            self.add(v.impact, v.issue_count)

    def __getitem__(self, level: Union[str, ImpactLevel]) -> int:
        return self.counts.get(ImpactLevel(level), 0)

    @property
    def total_issues(self) -> int:
        return sum(self.counts.values())

    def as_dict(self) -> Dict[str, int]:
        """``{"totalIssues": n, "critical": n, ...}`` in the storage/report shape."""
        data = {"totalIssues": self.total_issues}
        data.update({level.value: self.counts.get(level, 0) for level in ImpactLevel})
        return data


def penalty(counts: ImpactCounts) -> int:
    return sum(counts[level] * weight for level, weight in IMPACT_WEIGHTS.items())


def _round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def score(
    counts: ImpactCounts,
    *,
    baseline: int = DEFAULT_BASELINE,
    max_weight: float = DEFAULT_MAX_WEIGHT,
) -> float:
    """
    Severity-weighted score in ``[0, 100]`` rounded to one decimal.

    ``100 - penalty / ((total + baseline) * max_weight) * 100``, floored at 0.
    Half-way values round up.
    """
    if max_weight <= 0:
        raise ValueError("max_weight must be > 0")
    audit_base = counts.total_issues + baseline
    if audit_base == 0:
        return 100.0
    raw = 100 - (penalty(counts) / (audit_base * max_weight)) * 100
    return max(0.0, _round_half_up(raw))
