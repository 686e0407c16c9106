"""Tests for the CLI entry point."""

import json

import pytest
from click.testing import CliRunner

from reviewlens_cli.cli import main
from reviewlens_cli.commands.blocks import export_blocks
from reviewlens_core.models import Category, ParsedIssue, ParsedReviewDocument, Severity

REPORT = """# Review: checkout-service

**Generated on**: 2024-06-01T12:00:00Z
**Branch**: feature/cart
**Repository**: acme/checkout

## Findings

**[LOW] Unused import (Line 3)**
The os module is imported but never used.

### 🔴 CRITICAL - SQL injection in search (src/search.py:88)
User input is concatenated into the query string.
**Suggestion**: use parameterized queries.
**Agent Prompt**:
```
Parameterize the query built in search().
```

**HIGH**: Missing timeout on HTTP call - Line 41

```diff
-requests.get(url)
+requests.get(url, timeout=5)
```

```python // src/search.py
cursor.execute(sql, params)
```
"""


def _issue(severity, category, line, title="t", file=None, agent_prompt=None):
    return ParsedIssue(
        line=line,
        severity=severity,
        category=category,
        title=title,
        description="d",
        suggestion="s",
        agent_prompt=agent_prompt,
        file=file,
    )


DOCUMENT = ParsedReviewDocument(
    title="Stub review",
    timestamp="2024-06-01T12:00:00Z",
    issues=(
        _issue(Severity.CRITICAL, Category.SECURITY, 10, title="Token leak", file="auth.py"),
        _issue(Severity.MEDIUM, Category.PERFORMANCE, 4, title="N+1 query", file="db.py"),
        _issue(Severity.LOW, Category.SECURITY, 2, title="Weak hash", file="auth.py"),
    ),
)


@pytest.fixture
def report(tmp_path):
    path = tmp_path / "review.md"
    path.write_text(REPORT, encoding="utf-8")
    return path


@pytest.fixture
def no_config(tmp_path):
    return ["--config", str(tmp_path / "nonexistent.yml")]


def _invoke(no_config, *args):
    return CliRunner().invoke(main, [*no_config, *args])


def _stub_document(mocker, document=DOCUMENT):
    return mocker.patch("reviewlens_cli.documents.parse_review_file", return_value=document)


class TestParse:
    def test_table_output(self, report, no_config):
        result = _invoke(no_config, "parse", str(report))
        assert result.exit_code == 0, result.output
        assert "Issues (3 of 3)" in result.output
        assert "critical" in result.output
        assert "3 issue(s)" in result.output

    def test_json_output(self, report, no_config):
        result = _invoke(no_config, "parse", str(report), "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["title"] == "Review: checkout-service"
        assert data["branch"] == "feature/cart"
        assert [i["severity"] for i in data["issues"]] == ["critical", "high", "low"]
        assert data["issues"][0]["file"] == "src/search.py"
        assert "src/search.py" in data["code_blocks"]

    def test_min_severity_filters_output(self, mocker, no_config, tmp_path):
        _stub_document(mocker)
        result = _invoke(no_config, "parse", str(tmp_path / "r.md"), "--json", "--min-severity", "medium")
        data = json.loads(result.output)
        assert [i["title"] for i in data["issues"]] == ["Token leak", "N+1 query"]

    def test_category_filter(self, mocker, no_config, tmp_path):
        _stub_document(mocker)
        result = _invoke(no_config, "parse", str(tmp_path / "r.md"), "--json", "--category", "security")
        data = json.loads(result.output)
        assert [i["title"] for i in data["issues"]] == ["Token leak", "Weak hash"]

    def test_filters_read_from_config_file(self, mocker, tmp_path):
        _stub_document(mocker)
        cfg = tmp_path / ".lens.yml"
        cfg.write_text("categories: [performance]\n")
        result = CliRunner().invoke(main, ["--config", str(cfg), "parse", str(tmp_path / "r.md"), "--json"])
        data = json.loads(result.output)
        assert [i["title"] for i in data["issues"]] == ["N+1 query"]

    def test_dedupe_flag_passed_to_parser(self, mocker, no_config, tmp_path):
        parse = _stub_document(mocker)
        _invoke(no_config, "parse", str(tmp_path / "r.md"), "--dedupe")
        assert parse.call_args.kwargs["dedupe"] is True

    def test_dedupe_off_by_default(self, mocker, no_config, tmp_path):
        parse = _stub_document(mocker)
        _invoke(no_config, "parse", str(tmp_path / "r.md"))
        assert parse.call_args.kwargs["dedupe"] is False

    def test_fail_on_threshold_met(self, report, no_config):
        result = _invoke(no_config, "parse", str(report), "--fail-on", "high")
        assert result.exit_code == 1

    def test_fail_on_ignores_display_filters(self, mocker, no_config, tmp_path):
        _stub_document(mocker)
        result = _invoke(
            no_config, "parse", str(tmp_path / "r.md"), "--category", "performance", "--fail-on", "critical"
        )
        assert result.exit_code == 1

    def test_fail_on_threshold_not_met(self, mocker, no_config, tmp_path):
        _stub_document(mocker, ParsedReviewDocument(title="t", timestamp="now", issues=DOCUMENT.issues[1:]))
        result = _invoke(no_config, "parse", str(tmp_path / "r.md"), "--fail-on", "high")
        assert result.exit_code == 0

    def test_missing_file(self, no_config, tmp_path):
        result = _invoke(no_config, "parse", str(tmp_path / "missing.md"))
        assert result.exit_code == 2
        assert "not found" in result.output

    def test_bad_config_value(self, report, tmp_path):
        cfg = tmp_path / ".lens.yml"
        cfg.write_text("min_severity: moderate\n")
        result = CliRunner().invoke(main, ["--config", str(cfg), "parse", str(report)])
        assert result.exit_code == 2
        assert "Unknown severity" in result.output

    def test_empty_report(self, no_config, tmp_path):
        path = tmp_path / "empty.md"
        path.write_text("# Nothing to see\n")
        result = _invoke(no_config, "parse", str(path))
        assert result.exit_code == 0
        assert "No issues to show." in result.output

    def test_verbose_flag_accepted(self, report, tmp_path):
        result = CliRunner().invoke(main, ["--verbose", "--config", str(tmp_path / "x.yml"), "parse", str(report)])
        assert result.exit_code == 0


class TestStats:
    def test_breakdown(self, report, no_config):
        result = _invoke(no_config, "stats", str(report))
        assert result.exit_code == 0, result.output
        assert "Severity Breakdown" in result.output
        assert "Category Breakdown" in result.output
        assert "3 issue(s)" in result.output

    def test_most_flagged_files(self, mocker, no_config, tmp_path):
        _stub_document(mocker)
        result = _invoke(no_config, "stats", str(tmp_path / "r.md"), "--top", "1")
        assert "Top 1 Most Flagged Files" in result.output
        assert "auth.py" in result.output
        assert "db.py" not in result.output

    def test_no_issues(self, mocker, no_config, tmp_path):
        _stub_document(mocker, ParsedReviewDocument(title="t", timestamp="now"))
        result = _invoke(no_config, "stats", str(tmp_path / "r.md"))
        assert result.exit_code == 0
        assert "No issues found." in result.output
        assert "Severity Breakdown" not in result.output


class TestPrompts:
    def test_raw_output(self, report, no_config):
        result = _invoke(no_config, "prompts", str(report), "--raw")
        assert result.exit_code == 0, result.output
        assert "Parameterize the query built in search()." in result.output

    def test_skips_issues_without_prompt(self, mocker, no_config, tmp_path):
        doc = ParsedReviewDocument(
            title="t",
            timestamp="now",
            issues=(
                _issue(Severity.HIGH, Category.SECURITY, 1, agent_prompt="Fix the token check."),
                _issue(Severity.LOW, Category.GENERAL, 2),
            ),
        )
        _stub_document(mocker, doc)
        result = _invoke(no_config, "prompts", str(tmp_path / "r.md"), "--raw")
        assert result.output.strip() == "Fix the token check."

    def test_min_severity(self, mocker, no_config, tmp_path):
        doc = ParsedReviewDocument(
            title="t",
            timestamp="now",
            issues=(_issue(Severity.LOW, Category.GENERAL, 2, agent_prompt="Rename it."),),
        )
        _stub_document(mocker, doc)
        result = _invoke(no_config, "prompts", str(tmp_path / "r.md"), "--min-severity", "high")
        assert "No agent prompts found" in result.output


class TestBlocks:
    def test_lists_blocks(self, report, no_config):
        result = _invoke(no_config, "blocks", str(report))
        assert result.exit_code == 0, result.output
        assert "review.diff" in result.output
        assert "src/search.py" in result.output

    def test_exports_blocks(self, report, no_config, tmp_path):
        out = tmp_path / "out"
        result = _invoke(no_config, "blocks", str(report), "--out", str(out))
        assert result.exit_code == 0, result.output
        assert "Wrote 2 file(s)" in result.output
        assert (out / "review.diff").read_text() == "-requests.get(url)\n+requests.get(url, timeout=5)\n"
        assert (out / "src" / "search.py").read_text() == "cursor.execute(sql, params)\n"

    def test_no_blocks(self, no_config, tmp_path):
        path = tmp_path / "plain.md"
        path.write_text("# Plain\n\nNothing embedded.\n")
        result = _invoke(no_config, "blocks", str(path))
        assert "No diff or code blocks found." in result.output


class TestExportBlocks:
    def test_path_traversal_skipped(self, tmp_path):
        out = tmp_path / "out"
        written = export_blocks("", {"../evil.py": "x", "ok.py": "y"}, out)
        assert written == [(out / "ok.py").resolve()]
        assert not (tmp_path / "evil.py").exists()

    def test_diff_only(self, tmp_path):
        written = export_blocks("+a", {}, tmp_path)
        assert [p.name for p in written] == ["review.diff"]
        assert (tmp_path / "review.diff").read_text() == "+a\n"
