"""Turn an AI review report (markdown) into a ParsedReviewDocument.

The pipeline is a straight line of pure extractors over one immutable string:

    metadata → summary → issues (pattern strategies, else section fallback)
             → fenced blocks → sort

Nothing here raises on odd input. Every field has a default and anything the
heuristics cannot recover is left at it. The only hard failure is asking for
a file that does not exist.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from reviewlens_core.models import ParsedIssue, ParsedReviewDocument
from reviewlens_core.parsing.code_blocks import extract_code_blocks, extract_diff, find_fenced_blocks
from reviewlens_core.parsing.fallback import parse_structured_issues
from reviewlens_core.parsing.issues import parse_issues
from reviewlens_core.parsing.metadata import SUMMARY_LIMIT, extract_metadata, extract_summary

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "AI Code Review"


def sort_issues(issues) -> tuple[ParsedIssue, ...]:
    """Most severe first, then by line. Stable, so ties keep discovery order."""
    return tuple(sorted(issues, key=lambda issue: (issue.severity.rank, issue.line)))


def dedupe_issues(issues: list[ParsedIssue]) -> list[ParsedIssue]:
    """Keep the first issue for every (file, line, title)."""
    seen: set[tuple] = set()
    unique = []
    for issue in issues:
        key = (issue.file, issue.line, issue.title)
        if key in seen:
            continue
        seen.add(key)
        unique.append(issue)
    return unique


def parse_review_content(
    content: str,
    file_name: str | None = None,
    *,
    default_timestamp: str | None = None,
    dedupe: bool = False,
) -> ParsedReviewDocument:
    """Parse report text.

    ``file_name`` becomes the title when the report has no ``# heading``.
    ``default_timestamp`` is used when the report carries no date label; it
    defaults to the current UTC time, so pass one explicitly when the result
    must be reproducible.
    """
    metadata = extract_metadata(content)

    issues = parse_issues(content)
    if not issues:
        logger.debug("No issue patterns matched, scanning sections instead")
        issues = parse_structured_issues(content)
    if dedupe:
        before = len(issues)
        issues = dedupe_issues(issues)
        logger.debug("Dropped %d duplicate issue(s)", before - len(issues))

    blocks = find_fenced_blocks(content)

    return ParsedReviewDocument(
        title=metadata.get("title") or file_name or DEFAULT_TITLE,
        timestamp=metadata.get("timestamp") or default_timestamp or datetime.now(timezone.utc).isoformat(),
        branch=metadata.get("branch", "main"),
        repository=metadata.get("repository", "unknown"),
        provider=metadata.get("provider", "AI"),
        model=metadata.get("model", "unknown"),
        summary=extract_summary(content)[:SUMMARY_LIMIT],
        issues=sort_issues(issues),
        code_blocks=extract_code_blocks(blocks),
        diff_content=extract_diff(blocks),
    )


def parse_review_file(
    file_path: str | Path,
    *,
    default_timestamp: str | None = None,
    dedupe: bool = False,
) -> ParsedReviewDocument:
    """Read a report from disk and parse it.

    The file is decoded as UTF-8; undecodable bytes become U+FFFD. Without a
    date label in the report, the file's modification time is used as the
    timestamp so repeated parses of the same file agree.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Review file not found: {file_path}")

    content = path.read_text(encoding="utf-8", errors="replace")
    if default_timestamp is None:
        default_timestamp = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc).isoformat()

    return parse_review_content(content, path.name, default_timestamp=default_timestamp, dedupe=dedupe)
