"""Revision query commands"""

import json

import click

from ..decorators import with_deployer
from ..utils.output import (
    console,
    format_changes,
    format_revision,
    format_revisions_table,
)
from ...constants import MSG_NO_REVISION


@click.command()
@click.option('--output', type=click.Choice(['panel', 'json', 'brief']),
              default='panel', help='Output format')
@with_deployer
def current(deployer, output):
    """Show the live revision

    Examples:

        s3-deployer current

        s3-deployer current --output brief
    """
    info = deployer.current()

    if output == 'json':
        click.echo(json.dumps(info.to_dict() if info else None, indent=2))
    elif output == 'brief':
        console.print(info.revision if info else MSG_NO_REVISION)
    else:
        format_revision(info)


@click.command(name='list')
@click.option('--limit', type=int, default=None, help='Number of revisions to show')
@click.option('--output', type=click.Choice(['table', 'json', 'brief']),
              default='table', help='Output format')
@with_deployer
def list_revisions(deployer, limit, output):
    """List staged revisions, newest first

    Examples:

        s3-deployer list

        s3-deployer list --limit 5 --output brief
    """
    revisions = deployer.list_revisions()

    if not revisions:
        console.print("[yellow]No revisions found[/yellow]")
        return

    if limit:
        revisions = revisions[-limit:]

    if output == 'json':
        click.echo(json.dumps([r.to_dict() for r in reversed(revisions)], indent=2))
    elif output == 'brief':
        for info in reversed(revisions):
            marker = "*" if info.is_current else " "
            console.print(f"{marker} {info.revision} {info.sha or '-'}")
    else:
        format_revisions_table(revisions)


@click.command()
@click.argument('from_revision')
@click.argument('to_revision')
@with_deployer
def changes(deployer, from_revision, to_revision):
    """Show commits between two revisions

    FROM_REVISION and TO_REVISION are revision identifiers or commit id
    prefixes.

    Examples:

        s3-deployer changes 20240119170000 20240120093000
    """
    summaries = deployer.changes(from_revision, to_revision)
    format_changes(from_revision, to_revision, summaries)
