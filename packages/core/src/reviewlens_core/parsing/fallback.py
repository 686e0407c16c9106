"""Coarse section-based recovery for reports no issue style recognised.

Only used when the pattern matcher found nothing. The report is cut into
``##`` sections; any section that talks about severity yields one issue per
"line N" it mentions. The result is crude but keeps line references from
prose-only reviews.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from reviewlens_core.models import ParsedIssue, Severity
from reviewlens_core.parsing.classifier import infer_category_from_content, infer_severity_from_content
from reviewlens_core.parsing.issues import DEFAULT_SUGGESTION
from reviewlens_core.parsing.markdown import clean_markdown

logger = logging.getLogger(__name__)

NO_SECTION_DESCRIPTION = "Issue found in code review"

_SECTION_LIMIT = 200
_SECTION_DESCRIPTION_LINES = 3

_SECTION_SPLIT_RE = re.compile(r"\n(?=##\s)")
_LINE_MENTION_RE = re.compile(r"line\s+(\d{1,9})(?!\d)", re.IGNORECASE)
_SECTION_SUGGESTION_RE = re.compile(r"(?:suggestion|fix|solution):\s*(.*)", re.IGNORECASE)


def extract_title_from_section(section: str) -> str:
    for line in section.split("\n"):
        stripped = line.strip()
        if stripped.startswith(("##", "**")):
            return clean_markdown(stripped)
    return ""


def extract_description_from_section(section: str) -> str:
    lines = [line for line in section.split("\n") if line.strip() and not line.startswith(("#", "**"))]
    return " ".join(lines[:_SECTION_DESCRIPTION_LINES])[:_SECTION_LIMIT]


def extract_suggestion_from_section(section: str) -> str:
    match = _SECTION_SUGGESTION_RE.search(section)
    return match.group(1)[:_SECTION_LIMIT] if match else ""


def _guarded(extractor: Callable[[str], str], section: str, placeholder: str) -> str:
    """Run one field extractor; a failure costs that field, not the parse."""
    try:
        return extractor(section) or placeholder
    except Exception as e:
        logger.warning("Section field extraction failed, using %r (section %r): %s", placeholder, section[:60], e)
        return placeholder


def parse_structured_issues(content: str) -> list[ParsedIssue]:
    issues: list[ParsedIssue] = []
    for section in _SECTION_SPLIT_RE.split(content):
        severity = infer_severity_from_content(section)
        # INFO is what inference returns when the section has no severity words.
        if severity is Severity.INFO:
            continue

        category = infer_category_from_content(section)
        for mention in _LINE_MENTION_RE.finditer(section):
            line = int(mention.group(1))
            if line < 1:
                continue
            issues.append(
                ParsedIssue(
                    line=line,
                    severity=severity,
                    category=category,
                    title=_guarded(extract_title_from_section, section, f"Issue at line {line}"),
                    description=_guarded(extract_description_from_section, section, NO_SECTION_DESCRIPTION),
                    suggestion=_guarded(extract_suggestion_from_section, section, DEFAULT_SUGGESTION),
                )
            )

    logger.debug("Section fallback recovered %d issue(s)", len(issues))
    return issues
