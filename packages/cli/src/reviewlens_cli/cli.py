"""CLI entry point for reviewlens.

Commands:
  parse    — list the issues recovered from a review report
  stats    — severity and category breakdown of a report
  prompts  — print the agent prompts attached to issues
  blocks   — list or export the diff and code blocks of a report
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from reviewlens_cli.commands.blocks import blocks_cmd
from reviewlens_cli.commands.parse import parse_cmd
from reviewlens_cli.commands.prompts import prompts_cmd
from reviewlens_cli.commands.stats import stats_cmd

console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich on stderr.

    WARNING by default so guarded extraction failures still show up;
    --verbose adds the per-strategy debug trail.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.root.handlers.clear()
    handler = RichHandler(console=console, show_path=False)
    handler.setLevel(level)
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])


@click.group()
@click.version_option(
    version=importlib.metadata.version("reviewlens"),
    prog_name="reviewlens",
)
@click.option(
    "--config",
    "config_path",
    default=".reviewlens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVIEWLENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging from the parser.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Recover structured findings from AI-generated code review reports."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(parse_cmd)
main.add_command(stats_cmd)
main.add_command(prompts_cmd)
main.add_command(blocks_cmd)
