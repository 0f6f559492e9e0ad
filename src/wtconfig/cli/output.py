"""Output utilities for CLI commands with clear intent.

- user_output: human-facing messages, routed to stderr
- machine_output: data meant to be consumed by scripts, routed to stdout
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Output a message for the user (stderr)."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", nl: bool = True) -> None:
    """Output data for machine consumption (stdout)."""
    click.echo(message, nl=nl)
