"""Error boundary handling for CLI commands.

Catches well-known exceptions at CLI entry points and displays clean error
messages without stack traces.
"""

import functools
from collections.abc import Callable
from typing import Any

import click

from wtconfig.cli.output import user_output
from wtconfig.core.errors import WtConfigError


def cli_error_boundary[T: Callable[..., Any]](func: T) -> T:
    """Decorator that turns well-known exceptions into a styled error and exit 1.

    Catches:
        - WtConfigError: invalid keys, unknown worktrees, storage failures, ...
        - ValueError: Invalid input or configuration
        - PermissionError: Permission denied errors

    All other exceptions bubble up normally with full stack traces.

    Example:
        @click.command()
        @cli_error_boundary
        def my_command():
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except WtConfigError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from None
        except ValueError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from None
        except PermissionError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
