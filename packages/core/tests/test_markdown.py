"""Tests for markdown cleanup."""

from reviewlens_core.parsing.markdown import clean_markdown


class TestCleanMarkdown:
    def test_strips_bold_italic_and_inline_code(self):
        assert clean_markdown("**bold** and *italic* and `code`") == "bold and italic and code"

    def test_strips_heading_markers(self):
        assert clean_markdown("## Findings") == "Findings"
        assert clean_markdown("###### Deep") == "Deep"

    def test_strips_list_bullets_per_line(self):
        assert clean_markdown("- one\n- two\n+ three") == "one\ntwo\nthree"

    def test_trims_surrounding_whitespace(self):
        assert clean_markdown("   padded   \n") == "padded"

    def test_leaves_html_entities_alone(self):
        assert clean_markdown("a &amp; b &lt;c&gt;") == "a &amp; b &lt;c&gt;"

    def test_empty_string(self):
        assert clean_markdown("") == ""

    def test_idempotent(self):
        text = "## Title\n**Bold** text with `code` and *emphasis*\n- item one\n* item two"
        once = clean_markdown(text)
        assert clean_markdown(once) == once
