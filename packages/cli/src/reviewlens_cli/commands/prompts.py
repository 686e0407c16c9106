"""prompts command — print the agent prompts attached to issues."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

from reviewlens_cli.documents import SEVERITY_CHOICES, SEVERITY_STYLE, load_document, resolve_config, severity_or_none
from reviewlens_core.report import filter_issues

console = Console()


@click.command("prompts")
@click.argument("file_path", type=click.Path(dir_okay=False))
@click.option(
    "--min-severity",
    type=click.Choice(SEVERITY_CHOICES, case_sensitive=False),
    default=None,
    help="Skip issues below this severity. Overrides config file.",
)
@click.option("--raw", is_flag=True, help="Print only the prompt text, separated by blank lines.")
@click.pass_context
def prompts_cmd(ctx, file_path: str, min_severity: str | None, raw: bool):
    """Print ready-to-paste prompts for coding agents.

    Only issues whose report entry carried an "Agent Prompt" block (or a
    Context/Task pair) have one. --raw output is meant for piping into a
    clipboard tool or an agent's stdin.
    """
    config = resolve_config(ctx, cli_overrides={"min_severity": min_severity})
    document = load_document(file_path, dedupe=bool(config["dedupe"]))
    issues = [
        issue
        for issue in filter_issues(document.issues, min_severity=severity_or_none(config["min_severity"]))
        if issue.agent_prompt
    ]

    if raw:
        click.echo("\n\n".join(issue.agent_prompt for issue in issues))
        return

    if not issues:
        console.print("[yellow]No agent prompts found in this report.[/yellow]")
        return

    for issue in issues:
        style = SEVERITY_STYLE[issue.severity]
        where = f"{issue.file}:{issue.line}" if issue.file else f"line {issue.line}"
        console.print(
            f"[{style}]{issue.severity.value.upper()}[/{style}]  [bold]{escape(issue.title)}[/bold]  "
            f"[cyan]{escape(where)}[/cyan]"
        )
        console.print(escape(issue.agent_prompt), highlight=False)
        console.print()
