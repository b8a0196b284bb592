"""
Configuration commands.

Show the effective configuration and change single settings in the
config file.
"""

import json

import click
from rich.console import Console
from rich.markup import escape

from ..config import CONFIG_KEYS, get_config_path, load_config, save_config, set_config_value

console = Console(highlight=False)


@click.group('config')
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command('show')
@click.option('--pretty', is_flag=True, help='Display as formatted JSON instead of single-line JSON')
@click.option('--path', is_flag=True, help='Show the config file path being used')
def show_config(pretty, path):
    """Show the current configuration with all merges applied."""
    if path:
        click.echo(json.dumps({'config_path': str(get_config_path())}))
        return

    config = load_config()
    if pretty:
        click.echo(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        click.echo(json.dumps(config, ensure_ascii=False))


@config_cmd.command('set')
@click.argument('key', type=click.Choice(sorted(CONFIG_KEYS)))
@click.argument('value')
def set_config(key, value):
    """Set KEY to VALUE in the config file.

    \b
    Examples:
        bzrsource config set discard-changes true
        bzrsource config set bzr-binary /usr/bin/brz
    """
    config = set_config_value(load_config(), key, value)
    save_config(config)
    console.print(f"[green]✓[/green] {escape(key)} = [cyan]{escape(value)}[/cyan] "
                  f"saved to {escape(str(get_config_path()))}")
