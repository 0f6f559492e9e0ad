"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

import click

from wtconfig.cli.output import user_output
from wtconfig.core.global_config import (
    FilesystemGlobalConfigStore,
    GlobalConfig,
    GlobalConfigStore,
    InMemoryGlobalConfigStore,
)
from wtconfig.core.persistence.abc import ConfigPersistence
from wtconfig.core.persistence.fake import FakeConfigPersistence
from wtconfig.core.persistence.real import GitFileConfigPersistence
from wtconfig.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel
from wtconfig.core.services.config_service import WorktreeConfigService


@dataclass(frozen=True)
class WtConfigContext:
    """Immutable context holding all dependencies for wtconfig operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    persistence: ConfigPersistence
    config_store: GlobalConfigStore
    global_config: GlobalConfig
    repo: RepoContext | NoRepoSentinel

    def config_service(self) -> WorktreeConfigService:
        """Fresh service (with its own registry) over this context's persistence."""
        return WorktreeConfigService(self.persistence)

    @staticmethod
    def for_test(
        persistence: ConfigPersistence | None = None,
        config_store: GlobalConfigStore | None = None,
        global_config: GlobalConfig | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
    ) -> "WtConfigContext":
        """Create test context with in-memory defaults for anything not given.

        Example:
            >>> git_dir = Path("/repo/.git")
            >>> repo = RepoContext(root=Path("/repo"), git_dir=git_dir, worktree=MAIN_WORKTREE)
            >>> ctx = WtConfigContext.for_test(persistence=FakeConfigPersistence(), repo=repo)
        """
        if persistence is None:
            persistence = FakeConfigPersistence()

        if global_config is None:
            global_config = GlobalConfig()

        if config_store is None:
            config_store = InMemoryGlobalConfigStore(config=global_config)

        if repo is None:
            repo = NoRepoSentinel()

        return WtConfigContext(
            persistence=persistence,
            config_store=config_store,
            global_config=global_config,
            repo=repo,
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists.

    Returns:
        tuple[Path | None, str | None]: (path, error_message)
    """
    try:
        return (Path.cwd(), None)
    except (FileNotFoundError, OSError):
        return (None, "Current working directory no longer exists")


def create_context() -> WtConfigContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.
    """
    cwd, error_msg = safe_cwd()
    if cwd is None:
        assert error_msg is not None
        user_output(click.style("Error: ", fg="red") + error_msg)
        raise SystemExit(1)

    config_store = FilesystemGlobalConfigStore()
    try:
        global_config = config_store.load()
    except ValueError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from None

    return WtConfigContext(
        persistence=GitFileConfigPersistence(),
        config_store=config_store,
        global_config=global_config,
        repo=discover_repo_or_sentinel(cwd),
    )
