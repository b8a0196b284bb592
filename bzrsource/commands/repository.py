"""
Repository inspection commands.

Shows what a package resolver would see for a Bazaar repository.
"""

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich import box

from ..driver import BzrDriver
from ..infra.console import ConsoleIO
from .utils import get_config, handle_errors

console = Console(highlight=False)


def _driver(ctx: click.Context, url: str) -> BzrDriver:
    io = ConsoleIO(console=console, verbose=ctx.obj.get('verbose', False))
    driver = BzrDriver({'url': url}, io, get_config(ctx))
    driver.initialize()
    return driver


def _render_map(title: str, entries, revisions=None) -> None:
    if not entries:
        console.print(f"[yellow]No {title.lower()} found.[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED, show_header=True, header_style="bold magenta")
    table.add_column("Name")
    table.add_column("Reference")
    if revisions is not None:
        table.add_column("Revno")

    for name, reference in entries.items():
        row = [escape(name), escape(reference)]
        if revisions is not None:
            row.append(escape(revisions.get(name, '')))
        table.add_row(*row)

    console.print(table)


@click.command('supports')
@click.argument('url')
@click.option('--deep', is_flag=True, help='Probe the URL with bzr info if it is not recognised')
@click.pass_context
@handle_errors
def supports_cmd(ctx, url, deep):
    """Tell whether URL looks like a Bazaar repository.

    Exits 0 when supported, 1 otherwise.
    """
    supported = BzrDriver.supports(ConsoleIO(console=console), url, deep=deep, config=get_config(ctx))
    if supported:
        console.print(f"[green]{escape(url)} is a Bazaar repository[/green]")
    else:
        console.print(f"[yellow]{escape(url)} is not recognised as a Bazaar repository[/yellow]")
        raise SystemExit(1)


@click.command('tags')
@click.argument('url')
@click.option('--json', 'json_output', is_flag=True, help='Output as JSON')
@click.pass_context
@handle_errors
def tags_cmd(ctx, url, json_output):
    """List the tags of the repository at URL."""
    driver = _driver(ctx, url)
    tags = driver.get_tags()

    if json_output:
        click.echo(json.dumps(tags, indent=2))
        return
    _render_map("Tags", tags, driver.tag_revisions)


@click.command('branches')
@click.argument('url')
@click.option('--json', 'json_output', is_flag=True, help='Output as JSON')
@click.pass_context
@handle_errors
def branches_cmd(ctx, url, json_output):
    """List the branches of the repository at URL."""
    branches = _driver(ctx, url).get_branches()

    if json_output:
        click.echo(json.dumps(branches, indent=2))
        return
    _render_map("Branches", branches)


@click.command('show')
@click.argument('url')
@click.argument('reference', required=False)
@click.option('--json', 'json_output', is_flag=True, help='Output as JSON')
@click.pass_context
@handle_errors
def show_cmd(ctx, url, reference, json_output):
    """Show the manifest of URL at REFERENCE (default: tip).

    \b
    Examples:
        bzrsource show lp:~jdoe/project/trunk
        bzrsource show lp:~jdoe/project/trunk 1.0 --json
    """
    driver = _driver(ctx, url)
    reference = reference or driver.get_root_identifier()
    info = driver.get_composer_information(reference)

    if json_output:
        click.echo(json.dumps({'source': driver.get_source(reference), 'manifest': info}, indent=2))
        return

    if info is None:
        console.print(f"[yellow]No manifest at {escape(reference)}[/yellow]")
        return

    table = Table(title=f"{info.get('name', url)} @ {reference}", box=box.ROUNDED,
                  show_header=True, header_style="bold magenta")
    table.add_column("Field")
    table.add_column("Value")
    for key, value in info.items():
        if not isinstance(value, str):
            value = json.dumps(value)
        table.add_row(escape(key), escape(value))
    console.print(table)
