"""blocks command — list or export the diff and code blocks of a report."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reviewlens_cli.documents import load_document

console = Console()
logger = logging.getLogger(__name__)

DIFF_FILE_NAME = "review.diff"


def _safe_target(out_dir: Path, name: str) -> Path | None:
    """Resolve name under out_dir, or None if it would escape it."""
    target = (out_dir / name).resolve()
    if out_dir.resolve() not in target.parents:
        return None
    return target


def export_blocks(diff_content: str, code_blocks: Mapping[str, str], out_dir: Path) -> list[Path]:
    """Write the diff and every code block under out_dir; return written paths."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    files = dict(code_blocks)
    if diff_content:
        files[DIFF_FILE_NAME] = diff_content

    for name, code in files.items():
        target = _safe_target(out_dir, name)
        if target is None:
            logger.warning("Skipping block %r: path points outside %s", name, out_dir)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(code if code.endswith("\n") else code + "\n", encoding="utf-8")
        written.append(target)
    return written


@click.command("blocks")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to write the blocks into. Omit to only list them.",
)
def blocks_cmd(file_path: str, out_dir: str | None):
    """List the diff and code blocks embedded in a report, or export them.

    With --out, the diff is written as review.diff and every code block under
    its file name (or code.<ext> when the block was not named).
    """
    document = load_document(file_path)

    if out_dir is not None:
        written = export_blocks(document.diff_content, document.code_blocks, Path(out_dir))
        console.print(f"[green]Wrote {len(written)} file(s) to {escape(out_dir)}[/green]")
        return

    if not document.diff_content and not document.code_blocks:
        console.print("[yellow]No diff or code blocks found.[/yellow]")
        return

    table = Table(title="Embedded blocks", show_header=True, header_style="bold cyan")
    table.add_column("Name")
    table.add_column("Lines", justify="right")
    if document.diff_content:
        table.add_row(f"{DIFF_FILE_NAME} [dim](diff)[/dim]", str(len(document.diff_content.splitlines())))
    for name, code in document.code_blocks.items():
        table.add_row(escape(name), str(len(code.splitlines())))
    console.print(table)
