"""Views over parsed issues: filtering, grouping and severity counts.

These back the CLI listing and statistics, and the ``--fail-on`` gate used
in CI. None of them reorder issues; the parser's order is preserved.
"""

from __future__ import annotations

from collections.abc import Iterable

from reviewlens_core.models import Category, ParsedIssue, ParsedReviewDocument, Severity


def filter_issues(
    issues: Iterable[ParsedIssue],
    min_severity: Severity | None = None,
    categories: Iterable[Category] | None = None,
    file: str | None = None,
) -> list[ParsedIssue]:
    """Keep issues at or above min_severity, in one of categories, in file.

    Each criterion is skipped when None (or, for categories, empty).
    """
    wanted = set(categories or ())
    result = []
    for issue in issues:
        if min_severity is not None and issue.severity.rank > min_severity.rank:
            continue
        if wanted and issue.category not in wanted:
            continue
        if file is not None and issue.file != file:
            continue
        result.append(issue)
    return result


def count_by_severity(issues: Iterable[ParsedIssue]) -> dict[Severity, int]:
    counts = {severity: 0 for severity in Severity}
    for issue in issues:
        counts[issue.severity] += 1
    return counts


def count_by_category(issues: Iterable[ParsedIssue]) -> dict[Category, int]:
    counts = {category: 0 for category in Category}
    for issue in issues:
        counts[issue.category] += 1
    return counts


def group_by_file(issues: Iterable[ParsedIssue]) -> dict[str | None, list[ParsedIssue]]:
    groups: dict[str | None, list[ParsedIssue]] = {}
    for issue in issues:
        groups.setdefault(issue.file, []).append(issue)
    return groups


def highest_severity(issues: Iterable[ParsedIssue]) -> Severity | None:
    severities = [issue.severity for issue in issues]
    if not severities:
        return None
    return min(severities, key=lambda s: s.rank)


def exceeds_threshold(issues: Iterable[ParsedIssue], threshold: Severity) -> bool:
    """True when any issue is at least as severe as threshold."""
    top = highest_severity(issues)
    return top is not None and top.rank <= threshold.rank


def summarize(document: ParsedReviewDocument) -> str:
    """One-line verdict, e.g. ``3 issue(s): 1 critical, 2 low``."""
    if not document.issues:
        return "No issues found."
    counts = count_by_severity(document.issues)
    parts = [f"{count} {severity.value}" for severity, count in counts.items() if count]
    return f"{len(document.issues)} issue(s): " + ", ".join(parts)
