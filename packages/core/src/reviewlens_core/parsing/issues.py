"""Locate issue announcements in a review report and mine their details.

Reports written by different models announce findings in different styles.
Each style is recognised by its own strategy; every strategy is a pure
function over the report text that returns fresh match records, and the
strategies run one after another over the whole document:

    1. **[CRITICAL] Title (Line 42)**
    2. ### 🔴 CRITICAL - Title (src/app.js:42)
    3. ❌ **Title (Line 42)**: description
    4. **CRITICAL**: Title - Line 42

A single finding written in a way that satisfies two styles is reported
twice. Callers that care can de-duplicate on (file, line, title).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Union

from reviewlens_core.models import ParsedIssue, Severity
from reviewlens_core.parsing.classifier import infer_category_from_content, normalize_severity, severity_from_tag
from reviewlens_core.parsing.markdown import clean_markdown

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 300
SUGGESTION_LIMIT = 400

NO_DESCRIPTION = "No description available"
DEFAULT_SUGGESTION = "Review and address this issue"

# Context window around a match, relative to the match start.
_WINDOW_BEFORE = 200
_WINDOW_AFTER = 1000
_DESCRIPTION_LINES = 4

_SEVERITY_WORDS = r"CRITICAL|HIGH|MEDIUM|LOW|INFO"
_SEVERITY_EMOJI = r"🔴|🟠|🟡|🔵|ℹ️?"
# Nine digits at most; longer runs are not line numbers and are not matched.
_LINE_NUMBER = r"(\d{1,9})(?!\d)"

# A bracketed tag accepts any token; only a whole severity keyword or emoji
# survives severity_from_tag, so "[MODERATE]" and "[Follow-up]" are dropped.
_BOLD_TAG_RE = re.compile(
    rf"\*\*(?:\[([^\]\n]+)\]|({_SEVERITY_WORDS}|{_SEVERITY_EMOJI}))[ \t]+(.+?)[ \t]*"
    rf"\((?:Line[ \t]+)?{_LINE_NUMBER}\)\*\*",
    re.IGNORECASE,
)
_HEADING_RE = re.compile(
    rf"###[ \t]*(?:{_SEVERITY_EMOJI})?[ \t]*({_SEVERITY_WORDS})[ \t]*-?[ \t]*(.+?)[ \t]*"
    rf"\(([^:()\n]+):{_LINE_NUMBER}(?::{_LINE_NUMBER})?\)",
    re.IGNORECASE,
)
_EMOJI_INLINE_RE = re.compile(
    rf"(❌|🔶|🟡|🔵|ℹ️?)[ \t]*\*\*(.+?)[ \t]*\((?:Line[ \t]+)?{_LINE_NUMBER}\)\*\*:?[ \t]*(.*)",
    re.IGNORECASE,
)
_LABEL_DASH_RE = re.compile(
    rf"\*\*({_SEVERITY_WORDS}|{_SEVERITY_EMOJI})\*\*:?[ \t]*(.+?)[ \t]*-?[ \t]*\bLine[ \t]+{_LINE_NUMBER}",
    re.IGNORECASE,
)

_EMOJI_SEVERITY = {
    "❌": Severity.CRITICAL,
    "🔶": Severity.HIGH,
    "🟡": Severity.MEDIUM,
    "🔵": Severity.LOW,
    "ℹ": Severity.INFO,
}

_SUGGESTION_RE = re.compile(
    r"(?:Suggestion|Fix|Solution|Recommendation)(?:\*\*)?:(?:\*\*)?\s*(.*?)(?=\n\*\*|\n##|\Z)",
    re.IGNORECASE | re.DOTALL,
)
_AGENT_PROMPT_FENCE_RE = re.compile(
    r"(?:Agent Prompt|🤖)[^\n`]*(?:\n[ \t]*)?```[^\n]*\n(.*?)```",
    re.IGNORECASE | re.DOTALL,
)
_CONTEXT_TASK_RE = re.compile(r"Context:[^\n]*\nTask:[^\n]*")


@dataclass(frozen=True)
class BoldTagMatch:
    """``**[SEVERITY] Title (Line N)**``"""

    start: int
    end: int
    severity: str
    title: str
    line: int


@dataclass(frozen=True)
class HeadingMatch:
    """``### 🔴 SEVERITY - Title (file:N[:C])``"""

    start: int
    end: int
    severity: str
    title: str
    file: str
    line: int
    column: int | None = None


@dataclass(frozen=True)
class EmojiInlineMatch:
    """``❌ **Title (Line N)**: Description``"""

    start: int
    end: int
    emoji: str
    title: str
    line: int
    description: str


@dataclass(frozen=True)
class LabelDashMatch:
    """``**SEVERITY**: Title - Line N``"""

    start: int
    end: int
    severity: str
    title: str
    line: int


IssueMatch = Union[BoldTagMatch, HeadingMatch, EmojiInlineMatch, LabelDashMatch]


def find_bold_tag_matches(content: str) -> list[BoldTagMatch]:
    return [
        BoldTagMatch(
            start=m.start(),
            end=m.end(),
            severity=m.group(1) or m.group(2),
            title=m.group(3),
            line=int(m.group(4)),
        )
        for m in _BOLD_TAG_RE.finditer(content)
    ]


def find_heading_matches(content: str) -> list[HeadingMatch]:
    return [
        HeadingMatch(
            start=m.start(),
            end=m.end(),
            severity=m.group(1),
            title=m.group(2),
            file=m.group(3).strip(),
            line=int(m.group(4)),
            column=int(m.group(5)) if m.group(5) else None,
        )
        for m in _HEADING_RE.finditer(content)
    ]


def find_emoji_inline_matches(content: str) -> list[EmojiInlineMatch]:
    return [
        EmojiInlineMatch(
            start=m.start(),
            end=m.end(),
            emoji=m.group(1),
            title=m.group(2),
            line=int(m.group(3)),
            description=m.group(4).strip(),
        )
        for m in _EMOJI_INLINE_RE.finditer(content)
    ]


def find_label_dash_matches(content: str) -> list[LabelDashMatch]:
    return [
        LabelDashMatch(
            start=m.start(),
            end=m.end(),
            severity=m.group(1),
            title=m.group(2),
            line=int(m.group(3)),
        )
        for m in _LABEL_DASH_RE.finditer(content)
    ]


STRATEGIES = (
    find_bold_tag_matches,
    find_heading_matches,
    find_emoji_inline_matches,
    find_label_dash_matches,
)


def find_issue_matches(content: str) -> list[IssueMatch]:
    """Run every strategy in order and concatenate their matches."""
    matches: list[IssueMatch] = []
    for strategy in STRATEGIES:
        found = strategy(content)
        logger.debug("%s: %d match(es)", strategy.__name__, len(found))
        matches.extend(found)
    return matches


def _match_severity(match: IssueMatch) -> Severity | None:
    if isinstance(match, EmojiInlineMatch):
        # The title usually names the severity ("Critical Issue"); the emoji
        # decides only when it does not.
        return normalize_severity(match.title) or _EMOJI_SEVERITY.get(match.emoji[0])
    return severity_from_tag(match.severity)


def _description_after(content: str, match: IssueMatch, window_end: int) -> str:
    # Index 0 is whatever follows the match on its own line.
    following = content[match.end : window_end].split("\n")[1 : 1 + _DESCRIPTION_LINES]
    kept = [line for line in following if line.strip() and not line.startswith(("**", "#"))]
    return clean_markdown(" ".join(kept))[:DESCRIPTION_LIMIT]


def _extract_suggestion(window: str) -> str:
    match = _SUGGESTION_RE.search(window)
    if match is None:
        return ""
    return clean_markdown(match.group(1))[:SUGGESTION_LIMIT]


def _extract_agent_prompt(window: str) -> str | None:
    match = _AGENT_PROMPT_FENCE_RE.search(window)
    if match:
        return match.group(1).strip() or None
    match = _CONTEXT_TASK_RE.search(window)
    if match:
        return match.group(0).strip()
    return None


def extract_issue_details(content: str, match: IssueMatch) -> ParsedIssue | None:
    """Turn one match into a ParsedIssue, mining the surrounding text.

    Returns None when the announced severity is not one we know or the line
    number is not a positive integer; such matches are dropped.
    """
    severity = _match_severity(match)
    if severity is None:
        logger.debug("Discarding match at offset %d: unknown severity %r", match.start, match)
        return None
    if match.line < 1:
        logger.debug("Discarding match at offset %d: line %d", match.start, match.line)
        return None

    window_start = max(0, match.start - _WINDOW_BEFORE)
    window_end = min(len(content), match.start + _WINDOW_AFTER)
    window = content[window_start:window_end]
    title = clean_markdown(match.title)

    description = ""
    if isinstance(match, EmojiInlineMatch) and match.description:
        description = clean_markdown(match.description)[:DESCRIPTION_LIMIT]
    if not description:
        description = _description_after(content, match, window_end)

    return ParsedIssue(
        line=match.line,
        column=getattr(match, "column", None),
        severity=severity,
        category=infer_category_from_content(window + title),
        title=title,
        description=description or NO_DESCRIPTION,
        suggestion=_extract_suggestion(window) or DEFAULT_SUGGESTION,
        agent_prompt=_extract_agent_prompt(window),
        file=getattr(match, "file", None),
    )


def parse_issues(content: str) -> list[ParsedIssue]:
    """Extract every issue announced in one of the recognised styles, unsorted."""
    issues = []
    for match in find_issue_matches(content):
        issue = extract_issue_details(content, match)
        if issue is not None:
            issues.append(issue)
    return issues
