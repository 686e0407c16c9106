"""Structured review data recovered from AI-generated markdown reports.

Decoupled from the parsing code so presentation and automation layers can
consume documents without importing any of the extraction heuristics.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class Severity(str, Enum):
    """Criticality of a finding, declared from most to least severe."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)


class Category(str, Enum):
    """Topical tag of a finding. GENERAL is used when nothing else fits."""

    SECURITY = "security"
    PERFORMANCE = "performance"
    ARCHITECTURE = "architecture"
    TESTING = "testing"
    DOCUMENTATION = "documentation"
    GENERAL = "general"


_SEVERITY_ORDER = tuple(Severity)


@dataclass(frozen=True)
class ParsedIssue:
    """A single review finding."""

    line: int
    severity: Severity
    category: Category
    title: str
    description: str
    suggestion: str
    column: int | None = None
    agent_prompt: str | None = None
    file: str | None = None

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "column": self.column,
            "severity": self.severity.value,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "suggestion": self.suggestion,
            "agent_prompt": self.agent_prompt,
            "file": self.file,
        }


@dataclass(frozen=True)
class ParsedReviewDocument:
    """Everything recovered from one review report.

    Built once by the parser and never mutated afterwards; ``code_blocks``
    is a read-only view. ``issues`` is already sorted by severity then line;
    it may contain duplicates when a single finding was announced in more
    than one style.
    """

    title: str
    timestamp: str
    branch: str = "main"
    repository: str = "unknown"
    provider: str = "AI"
    model: str = "unknown"
    summary: str = ""
    issues: tuple[ParsedIssue, ...] = ()
    code_blocks: Mapping[str, str] = field(default_factory=dict)
    diff_content: str = ""

    def __post_init__(self):
        object.__setattr__(self, "code_blocks", MappingProxyType(dict(self.code_blocks)))

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        return {
            "title": self.title,
            "timestamp": self.timestamp,
            "branch": self.branch,
            "repository": self.repository,
            "provider": self.provider,
            "model": self.model,
            "summary": self.summary,
            "issues": [issue.to_dict() for issue in self.issues],
            "code_blocks": dict(self.code_blocks),
            "diff_content": self.diff_content,
        }
