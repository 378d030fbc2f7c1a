# File: a11y_scout/audit/decoder.py
"""Normalize raw axe-core output into :class:`Violation` records.

Everything here is a pure function of its input: no network, no storage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple

__all__ = [
    "ImpactLevel",
    "AffectedNode",
    "Violation",
    "REMEDIATION_HINTS",
    "GENERIC_HINT",
    "decode",
    "parse_impact",
    "remediation_for",
]

logger = logging.getLogger("A11yScout")


class ImpactLevel(str, Enum):
    """Severity of an accessibility violation as reported by axe-core."""

    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"
    NONE = "none"


def parse_impact(value: Any) -> ImpactLevel:
    """Map an axe ``impact`` value to :class:`ImpactLevel`; anything unknown is ``NONE``."""
    if isinstance(value, ImpactLevel):
        return value
    if isinstance(value, str):
        try:
            return ImpactLevel(value.strip().lower())
        except ValueError:
            return ImpactLevel.NONE
    return ImpactLevel.NONE


GENERIC_HINT = "Review the examples and follow the linked WCAG guideline."

REMEDIATION_HINTS: Dict[str, str] = {
    "area-alt": "Give every <area> of an image map an alt text describing its link target.",
    "aria-allowed-attr": "Remove ARIA attributes that are not allowed on the element's role.",
    "aria-hidden-focus": "Make elements inside aria-hidden containers unfocusable (tabindex=\"-1\") or remove aria-hidden.",
    "aria-required-attr": "Add the ARIA attributes that the element's role requires.",
    "aria-required-children": "Add the child roles that this ARIA role must contain.",
    "aria-required-parent": "Place the element inside a container with the required parent role.",
    "aria-roles": "Use only valid, non-abstract ARIA role values.",
    "aria-valid-attr": "Fix misspelled or non-existent aria-* attribute names.",
    "aria-valid-attr-value": "Give ARIA attributes values that are valid for their type.",
    "button-name": "Give every button discernible text: inner text, aria-label or aria-labelledby.",
    "bypass": "Add a skip link or landmarks so keyboard users can bypass repeated blocks.",
    "color-contrast": "Increase the contrast between text and background to at least 4.5:1 (3:1 for large text).",
    "document-title": "Add a non-empty <title> that describes the page.",
    "duplicate-id": "Make every id attribute value unique within the page.",
    "duplicate-id-aria": "Make ids referenced by ARIA attributes unique.",
    "empty-heading": "Put text inside headings or remove the empty heading element.",
    "form-field-multiple-labels": "Associate each form field with a single <label>.",
    "frame-title": "Give every <iframe> and <frame> a title that describes its content.",
    "heading-order": "Use heading levels in order without skipping levels (h1, h2, h3...).",
    "html-has-lang": "Add a lang attribute to the <html> element.",
    "html-lang-valid": "Use a valid BCP 47 language code in the <html lang> attribute.",
    "image-alt": "Add alt text to images; use alt=\"\" for purely decorative images.",
    "image-redundant-alt": "Do not repeat surrounding link or button text in the image alt.",
    "input-button-name": "Give input buttons a value or aria-label that describes the action.",
    "input-image-alt": "Add alt text to <input type=\"image\"> describing its action.",
    "label": "Associate every form control with a <label>, aria-label or aria-labelledby.",
    "landmark-one-main": "Wrap the primary content of the page in a single <main> landmark.",
    "landmark-unique": "Give landmarks of the same type unique accessible names.",
    "link-name": "Give every link discernible text that describes its destination.",
    "list": "Only put <li>, <script> or <template> elements directly inside <ul> and <ol>.",
    "listitem": "Place <li> elements inside a <ul> or <ol>.",
    "meta-viewport": "Do not disable zooming: remove user-scalable=no and maximum-scale < 2.",
    "nested-interactive": "Do not nest interactive controls inside each other.",
    "page-has-heading-one": "Add a level-one heading that describes the page content.",
    "region": "Place all page content inside landmark regions (header, nav, main, footer).",
    "scrollable-region-focusable": "Make scrollable regions keyboard accessible (tabindex=\"0\" or focusable content).",
    "select-name": "Give every <select> an accessible name via <label> or aria-label.",
    "svg-img-alt": "Give SVG elements with role=\"img\" a text alternative (title or aria-label).",
    "tabindex": "Avoid positive tabindex values; rely on DOM order instead.",
    "td-headers-attr": "Point table headers attributes only at cells within the same table.",
    "th-has-data-cells": "Make sure every table header relates to at least one data cell.",
    "valid-lang": "Use valid language codes in lang attributes.",
    "video-caption": "Provide captions for video content.",
}


def remediation_for(rule_id: str) -> str:
    """Rule-specific fix suggestion, or the generic hint for unknown rules."""
    return REMEDIATION_HINTS.get(rule_id, GENERIC_HINT)


@dataclass(frozen=True, slots=True)
class AffectedNode:
    """One DOM node that failed a rule."""

    html: str
    failure_summary: str = ""
    target: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Violation:
    """One accessibility rule failure on a page."""

    rule_id: str
    impact: ImpactLevel
    description: str
    help_text: str
    remediation: str
    page_url: str
    affected_nodes: Tuple[AffectedNode, ...] = field(default_factory=tuple)
    reference_links: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def issue_count(self) -> int:
        """Issues this violation contributes to the aggregate: one per affected node."""
        return len(self.affected_nodes)


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _targets(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        # shadow DOM / iframe selectors come as nested lists
        return tuple(" >>> ".join(t) if isinstance(t, (list, tuple)) else str(t) for t in value)
    return ()


def _decode_nodes(raw_nodes: Any) -> Tuple[AffectedNode, ...]:
    if not isinstance(raw_nodes, (list, tuple)):
        return ()
    nodes: List[AffectedNode] = []
    for node in raw_nodes:
        if not isinstance(node, Mapping):
            continue
        nodes.append(
            AffectedNode(
                html=_text(node.get("html")),
                failure_summary=_text(node.get("failureSummary")),
                target=_targets(node.get("target")),
            )
        )
    return tuple(nodes)


def _raw_violations(raw: Any) -> Sequence[Any]:
    if isinstance(raw, Mapping):
        entries = raw.get("violations", [])
    else:
        entries = raw
    if isinstance(entries, (list, tuple)):
        return entries
    return []


def _decode_one(entry: Mapping[str, Any], page_url: str) -> Violation:
    rule_id = _text(entry.get("id")) or "unknown"
    help_url = _text(entry.get("helpUrl"))
    return Violation(
        rule_id=rule_id,
        impact=parse_impact(entry.get("impact")),
        description=_text(entry.get("description")),
        help_text=_text(entry.get("help")),
        remediation=remediation_for(rule_id),
        page_url=page_url,
        affected_nodes=_decode_nodes(entry.get("nodes")),
        reference_links=(help_url,) if help_url else (),
    )


def decode(raw_audit_output: Any, page_url: str) -> List[Violation]:
    """
    Turn one page's raw axe output into a list of :class:`Violation`.

    *raw_audit_output* is either the full axe result (a mapping with a
    ``violations`` key) or the bare ``violations`` list. Entries that are
    not mappings are skipped.
    """
    violations: List[Violation] = []
    for entry in _raw_violations(raw_audit_output):
        if not isinstance(entry, Mapping):
            logger.debug("Skipping malformed violation entry on %s: %r", page_url, entry)
            continue
        violations.append(_decode_one(entry, page_url))
    return violations

