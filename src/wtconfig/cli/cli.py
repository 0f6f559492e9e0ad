import logging
import os

import click

from wtconfig.cli.commands.config import config_group
from wtconfig.cli.commands.settings import settings_group
from wtconfig.cli.commands.wt import wt_group
from wtconfig.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

# Enable debug logging if WTCONFIG_DEBUG environment variable is set
DEBUG_ENV_VAR = "WTCONFIG_DEBUG"


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="wtconfig")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Resolve git configuration per worktree."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


cli.add_command(config_group)
cli.add_command(settings_group)
cli.add_command(wt_group)


def main() -> None:
    """CLI entry point used by the `wtconfig` console script."""
    if os.environ.get(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
    cli()
