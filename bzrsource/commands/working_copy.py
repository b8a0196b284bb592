"""
Working copy commands.

Thin wrappers over BzrDownloader; destructive ones go through the same
discard prompt a package manager would show.
"""

import click
from rich.console import Console
from rich.markup import escape

from ..domain.package import Package
from ..domain.reference import ROOT_IDENTIFIER
from ..downloader import BzrDownloader
from ..infra.console import ConsoleIO
from .utils import get_config, handle_errors

console = Console(highlight=False)


def _downloader(ctx: click.Context) -> BzrDownloader:
    io = ConsoleIO(console=console, verbose=ctx.obj.get('verbose', False))
    return BzrDownloader(io, get_config(ctx))


@click.command('checkout')
@click.argument('url')
@click.argument('path', type=click.Path())
@click.option('--reference', '-r', default=ROOT_IDENTIFIER, show_default=True,
              help='Revno, tag or revision spec to check out')
@click.pass_context
@handle_errors
def checkout_cmd(ctx, url, path, reference):
    """Create a lightweight checkout of URL in PATH."""
    _downloader(ctx).download(Package(url, reference), path)
    console.print(f"[green]Checked out {escape(reference)} into {escape(path)}[/green]")


@click.command('switch')
@click.argument('url')
@click.argument('path', type=click.Path(exists=True, file_okay=False))
@click.option('--reference', '-r', default=ROOT_IDENTIFIER, show_default=True,
              help='Revno, tag or revision spec to switch to')
@click.option('--from', 'from_reference', default=ROOT_IDENTIFIER, show_default=True,
              help='Reference currently checked out (for the change log)')
@click.pass_context
@handle_errors
def switch_cmd(ctx, url, path, reference, from_reference):
    """Switch the working copy at PATH to URL at REFERENCE.

    Local changes are listed and must be discarded first.
    """
    _downloader(ctx).update(Package(url, from_reference), Package(url, reference), path)
    console.print(f"[green]Switched {escape(path)} to {escape(reference)}[/green]")


@click.command('changes')
@click.argument('path', type=click.Path(exists=True, file_okay=False))
@click.pass_context
@handle_errors
def changes_cmd(ctx, path):
    """Show local changes to versioned files in PATH."""
    changes = _downloader(ctx).get_local_changes(path)
    if changes is None:
        console.print("[green]No local changes[/green]")
        return
    click.echo(changes)


@click.command('revert')
@click.argument('path', type=click.Path(exists=True, file_okay=False))
@click.option('--yes', '-y', is_flag=True, help='Discard without asking')
@click.pass_context
@handle_errors
def revert_cmd(ctx, path, yes):
    """Discard local changes in PATH."""
    downloader = _downloader(ctx)
    if yes:
        downloader.discard_changes(path)
    else:
        downloader.clean_changes(path, False)
    console.print(f"[green]{escape(path)} is clean[/green]")


@click.command('log')
@click.argument('path', type=click.Path(exists=True, file_okay=False))
@click.argument('from_reference')
@click.argument('to_reference')
@click.pass_context
@handle_errors
def log_cmd(ctx, path, from_reference, to_reference):
    """Show commits from FROM_REFERENCE to TO_REFERENCE (inclusive) in PATH."""
    click.echo(_downloader(ctx).get_commit_logs(from_reference, to_reference, path), nl=False)
