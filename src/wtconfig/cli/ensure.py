"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency.
"""

from typing import TYPE_CHECKING

import click

from wtconfig.cli.output import user_output
from wtconfig.core.repo_discovery import NoRepoSentinel, RepoContext

if TYPE_CHECKING:
    from wtconfig.core.context import WtConfigContext


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    def not_none[T](value: T | None, error_message: str) -> T:
        """Ensure value is not None, otherwise output styled error and exit.

        Provides type narrowing: takes `T | None` and returns `T`.

        Raises:
            SystemExit: If value is None (with exit code 1)
        """
        if value is None:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)
        return value

    @staticmethod
    def in_repo(ctx: "WtConfigContext") -> RepoContext:
        """Ensure the command runs inside a git worktree.

        Returns:
            The discovered RepoContext

        Raises:
            SystemExit: If the context holds a NoRepoSentinel (with exit code 1)
        """
        if isinstance(ctx.repo, NoRepoSentinel):
            user_output(click.style("Error: ", fg="red") + ctx.repo.message)
            raise SystemExit(1)
        return ctx.repo
