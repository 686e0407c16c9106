"""Keyword and emoji tables that map free text onto severities and categories.

Matching is plain substring membership on lower-cased text, checked in table
order. The order is significant: ambiguous text ("critical performance
regression in the auth layer") resolves to the first entry that matches, so
reordering a table changes classification results.
"""

from __future__ import annotations

from reviewlens_core.models import Category, Severity

SEVERITY_KEYWORDS: tuple[tuple[Severity, tuple[str, ...]], ...] = (
    (Severity.CRITICAL, ("critical", "🔴")),
    (Severity.HIGH, ("high", "🟠")),
    (Severity.MEDIUM, ("medium", "🟡")),
    (Severity.LOW, ("low", "🔵")),
    (Severity.INFO, ("info", "ℹ️", "ℹ")),
)

CATEGORY_KEYWORDS: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.SECURITY, ("security", "🛡️", "vulnerability", "auth")),
    (Category.PERFORMANCE, ("performance", "⚡", "optimization", "slow")),
    (Category.ARCHITECTURE, ("architecture", "🏗️", "design", "pattern")),
    (Category.TESTING, ("test", "🧪", "coverage")),
    (Category.DOCUMENTATION, ("document", "📚", "comment", "docs")),
)


def _first_match(text: str, table):
    lowered = text.lower()
    for value, keywords in table:
        if any(keyword in lowered for keyword in keywords):
            return value
    return None


def normalize_severity(token: str) -> Severity | None:
    """Map an explicit severity token (``"HIGH"``, ``"🔴"``) to a Severity.

    Returns None when the token carries no known keyword so the caller can
    drop the match instead of guessing.
    """
    return _first_match(token, SEVERITY_KEYWORDS)


def severity_from_tag(tag: str) -> Severity | None:
    """Map the text of a severity tag (``HIGH`` in ``[HIGH]``) to a Severity.

    Unlike normalize_severity the tag must be exactly a keyword or emoji, so
    labels such as ``[Follow-up]`` or ``[Highlight]`` are not severities.
    """
    token = tag.strip().lower()
    for severity, keywords in SEVERITY_KEYWORDS:
        if token in keywords:
            return severity
    return None


def infer_severity_from_content(text: str) -> Severity:
    """Guess the severity of a block of prose; INFO when nothing stands out.

    Only critical..low signals are considered. A paragraph that merely says
    "info" is not evidence of anything.
    """
    return _first_match(text, SEVERITY_KEYWORDS[:-1]) or Severity.INFO


def infer_category_from_content(text: str) -> Category:
    return _first_match(text, CATEGORY_KEYWORDS) or Category.GENERAL


def severity_rank(severity: Severity) -> int:
    """0 for critical up to 4 for info."""
    return severity.rank
