import re

# Applied in order: bold before italics so "**x**" is not read as two
# empty italic spans.
_CLEANUP_RULES = (
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"#{1,6}\s*"), ""),
    (re.compile(r"^\s*(?:[-*+]\s*)+", re.MULTILINE), ""),
)


def clean_markdown(text: str) -> str:
    """Strip bold, italic, inline code, heading and list-bullet markup."""
    for pattern, replacement in _CLEANUP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()
