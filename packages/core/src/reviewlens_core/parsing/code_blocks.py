"""Fenced code and diff blocks embedded in a review report."""

from __future__ import annotations

import re
from dataclasses import dataclass

# ```lang // path/to/file.ext
_FENCE_RE = re.compile(r"```([\w+#.-]*)[ \t]*(?://[ \t]*([^\n]*?))?[ \t]*\n(.*?)\n```", re.DOTALL)

LANGUAGE_EXTENSIONS = {
    "javascript": "js",
    "js": "js",
    "jsx": "jsx",
    "typescript": "ts",
    "ts": "ts",
    "tsx": "tsx",
    "python": "py",
    "py": "py",
    "java": "java",
    "kotlin": "kt",
    "go": "go",
    "rust": "rs",
    "php": "php",
    "ruby": "rb",
    "c": "c",
    "cpp": "cpp",
    "csharp": "cs",
    "swift": "swift",
    "bash": "sh",
    "shell": "sh",
    "sh": "sh",
    "css": "css",
    "html": "html",
    "json": "json",
    "yaml": "yml",
    "yml": "yml",
    "sql": "sql",
}


@dataclass(frozen=True)
class FencedBlock:
    language: str
    filename: str | None
    code: str


def find_fenced_blocks(content: str) -> list[FencedBlock]:
    return [
        FencedBlock(language=m.group(1).lower(), filename=(m.group(2) or "").strip() or None, code=m.group(3))
        for m in _FENCE_RE.finditer(content)
    ]


def extension_for_language(language: str) -> str:
    return LANGUAGE_EXTENSIONS.get(language.lower(), "txt")


def extract_diff(blocks: list[FencedBlock]) -> str:
    """The first ```diff block, else the first unlabelled block, else ""."""
    for block in blocks:
        if block.language == "diff":
            return block.code
    for block in blocks:
        if not block.language:
            return block.code
    return ""


def extract_code_blocks(blocks: list[FencedBlock]) -> dict[str, str]:
    """Map file names to code.

    A ``// filename`` comment on the fence names the block. Otherwise a
    labelled, non-diff block is stored as ``code.<ext>``; a later block with
    the same name replaces an earlier one.
    """
    code_blocks: dict[str, str] = {}
    for block in blocks:
        if block.filename:
            code_blocks[block.filename] = block.code
        elif block.language and block.language != "diff":
            code_blocks[f"code.{extension_for_language(block.language)}"] = block.code
    return code_blocks
