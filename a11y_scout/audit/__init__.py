"""a11y_scout.audit: декодирование результатов axe-core и расчёт оценки."""

from a11y_scout.audit.decoder import AffectedNode, ImpactLevel, Violation, decode
from a11y_scout.audit.scoring import ImpactCounts, score

__all__ = ["AffectedNode", "ImpactLevel", "Violation", "decode", "ImpactCounts", "score"]
