#!/usr/bin/env python3

import click

from bzrsource.commands.config import config_cmd
from bzrsource.commands.repository import supports_cmd, tags_cmd, branches_cmd, show_cmd
from bzrsource.commands.working_copy import checkout_cmd, switch_cmd, changes_cmd, revert_cmd, log_cmd
from bzrsource.config import Config, load_config, setup_logging


@click.group()
@click.version_option(package_name='bzrsource')
@click.option('--verbose', '-v', is_flag=True, help='Log every bzr command')
@click.pass_context
def cli(ctx, verbose):
    """bzrsource - Bazaar repositories as package sources.

    Inspect a Bazaar repository the way a package manager sees it (tags,
    branches, manifest per reference) and manage working copies.
    """
    data = load_config()
    setup_logging(data, verbose=verbose)
    ctx.obj = {'config': Config(data), 'verbose': verbose}


# Repository inspection
cli.add_command(supports_cmd)
cli.add_command(tags_cmd)
cli.add_command(branches_cmd)
cli.add_command(show_cmd)

# Working copies
cli.add_command(checkout_cmd)
cli.add_command(switch_cmd)
cli.add_command(changes_cmd)
cli.add_command(revert_cmd)
cli.add_command(log_cmd)

# Configuration
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
