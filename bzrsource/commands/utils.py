"""
Helpers shared by the CLI commands.
"""

import functools
import sys

import click
from rich.console import Console
from rich.markup import escape

from ..errors import VcsError, get_exit_code_for_exception

err_console = Console(stderr=True, highlight=False)


def handle_errors(func):
    """Turn library errors into a message on stderr and a typed exit code."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (VcsError, ValueError, OSError) as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            sys.exit(get_exit_code_for_exception(e))
    return wrapper


def get_config(ctx: click.Context):
    return ctx.obj['config']
