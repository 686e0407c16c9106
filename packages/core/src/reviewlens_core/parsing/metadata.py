"""Document-level fields: report metadata labels and the summary synopsis."""

from __future__ import annotations

import re

from reviewlens_core.parsing.markdown import clean_markdown

SUMMARY_LIMIT = 500
_PARAGRAPH_SUMMARY_LIMIT = 300


def _label(name: str) -> tuple[re.Pattern, ...]:
    """Bold-labelled line first, then the plain label."""
    return (
        re.compile(rf"\*\*{name}\*\*: (.+)", re.IGNORECASE),
        re.compile(rf"{name}: (.+)", re.IGNORECASE),
    )


# Field name -> patterns tried in order; first match wins.
_METADATA_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "timestamp": (*_label("Generated on"), re.compile(r"\*\*Date\*\*: (.+)", re.IGNORECASE)),
    "branch": _label("Branch"),
    "repository": _label("Repository"),
    "provider": (re.compile(r"\*\*AI Provider\*\*: (.+)", re.IGNORECASE), re.compile(r"Provider: (.+)", re.IGNORECASE)),
    "model": _label("Model"),
}

_TITLE_RE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)

_SUMMARY_PATTERNS = tuple(
    re.compile(rf"##[ \t]*{heading}[ \t]*\n(.*?)(?=\n##|\n\*\*|\Z)", re.IGNORECASE | re.DOTALL)
    for heading in ("Summary", "Review Summary", "Overview")
)


def extract_metadata(content: str) -> dict[str, str]:
    """Return only the metadata fields that were found in the report.

    Missing fields are simply absent from the result so the caller keeps its
    own defaults. ``title`` comes from the first level-1 heading.
    """
    found: dict[str, str] = {}
    for field_name, patterns in _METADATA_PATTERNS.items():
        for pattern in patterns:
            match = pattern.search(content)
            if match:
                found[field_name] = match.group(1).strip()
                break

    title_match = _TITLE_RE.search(content)
    if title_match:
        found["title"] = title_match.group(1).strip()

    return found


def extract_summary(content: str) -> str:
    """Find the synopsis under a Summary/Review Summary/Overview heading.

    Falls back to the second blank-line separated paragraph, which is where
    most reports put their opening prose after the title.
    """
    for pattern in _SUMMARY_PATTERNS:
        match = pattern.search(content)
        if match:
            summary = clean_markdown(match.group(1))[:SUMMARY_LIMIT]
            if summary:
                return summary
            break

    paragraphs = content.split("\n\n")
    if len(paragraphs) > 1:
        return clean_markdown(paragraphs[1])[:_PARAGRAPH_SUMMARY_LIMIT]
    return ""
