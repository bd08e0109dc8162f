# s3_deployer/cli/utils/output.py
"""Output formatting utilities"""

from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from ...constants import (
    EMOJI_ARROW,
    EMOJI_SUCCESS,
    MSG_NO_REVISION,
    MSG_STAGE_SUCCESS,
    MSG_SWITCH_SUCCESS,
)
from ...models import RevisionInfo, StageResult, SwitchResult, DeployResult
from ...utils.formatting import format_duration, format_timestamp, pluralize, short_sha

console = Console()


def _stage_lines(result: StageResult) -> List[str]:
    lines = [
        f"[bold]Revision:[/bold] {result.revision}",
        f"[bold]Files:[/bold] {result.files}",
    ]
    if result.sha:
        lines.append(f"[bold]Commit:[/bold] {result.sha}")
    else:
        lines.append("[bold]Commit:[/bold] [yellow]not recorded[/yellow]")
    return lines


def _switch_lines(result: SwitchResult) -> List[str]:
    return [
        f"[bold]From:[/bold] {result.from_revision or '-'}",
        f"[bold]To:[/bold] {result.to_revision}",
        f"[bold]Objects:[/bold] {result.files}",
    ]


def format_stage_result(result: StageResult) -> None:
    """Format and display stage operation result"""
    message = MSG_STAGE_SUCCESS.format(
        revision=result.revision,
        files=pluralize(result.files, 'file')
    )
    lines = [
        f"[green]{message}[/green]",
        "",
        *_stage_lines(result),
        f"[bold]Duration:[/bold] {format_duration(result.duration)}",
    ]
    console.print(Panel("\n".join(lines), title="Stage Result", border_style="green"))


def format_switch_result(result: SwitchResult) -> None:
    """Format and display switch operation result"""
    message = MSG_SWITCH_SUCCESS.format(
        from_revision=result.from_revision or '(none)',
        to_revision=result.to_revision
    )
    lines = [
        f"[green]{message}[/green]",
        "",
        *_switch_lines(result),
        f"[bold]Duration:[/bold] {format_duration(result.duration)}",
    ]
    console.print(Panel("\n".join(lines), title="Switch Result", border_style="green"))


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy operation result"""
    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] Deployed revision {result.revision}",
        "",
        *_stage_lines(result.stage),
        f"[bold]Previous:[/bold] {result.switch.from_revision or '-'}",
        f"[bold]Duration:[/bold] {format_duration(result.duration)}",
    ]
    console.print(Panel("\n".join(lines), title="Deploy Result", border_style="green"))


def format_revision(info: Optional[RevisionInfo]) -> None:
    """Display the live revision"""
    if info is None:
        console.print(f"[yellow]{MSG_NO_REVISION}[/yellow]")
        return

    lines = [
        f"[bold]Revision:[/bold] {info.revision}",
        f"[bold]Date:[/bold] {format_timestamp(info.timestamp)}",
        f"[bold]Commit:[/bold] {info.sha or '-'}",
    ]
    if info.summary:
        lines.append(f"[bold]Summary:[/bold] {info.summary}")

    console.print(Panel("\n".join(lines), title="Current Revision", border_style="cyan"))


def format_revisions_table(revisions: List[RevisionInfo]) -> None:
    """Display staged revisions, newest first"""
    table = Table(title="Revisions", box=box.SIMPLE)
    table.add_column("", width=1)
    table.add_column("Revision", style="cyan", no_wrap=True)
    table.add_column("Date", style="yellow")
    table.add_column("Commit", style="green")
    table.add_column("Summary", style="white")

    for info in reversed(revisions):
        table.add_row(
            "*" if info.is_current else "",
            info.revision,
            format_timestamp(info.timestamp),
            short_sha(info.sha),
            info.summary or "-"
        )

    console.print(table)


def format_changes(from_revision: str, to_revision: str, summaries: List[str]) -> None:
    """Display commits between two revisions"""
    if not summaries:
        console.print(f"[yellow]No changes found between {from_revision} and {to_revision}[/yellow]")
        return

    console.print(f"[bold]Changes {from_revision} {EMOJI_ARROW} {to_revision}:[/bold]")
    for summary in summaries:
        console.print(f"  • {summary}")
