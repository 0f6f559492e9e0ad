"""Pytest configuration and fixtures."""

import pytest

from wtconfig.core.repository import Repository
from wtconfig.core.resolver import ConfigResolver
from wtconfig.core.worktree_registry import WorktreeRegistry


@pytest.fixture
def registry() -> WorktreeRegistry:
    """Create a fresh WorktreeRegistry."""
    return WorktreeRegistry()


@pytest.fixture
def repository(registry: WorktreeRegistry) -> Repository:
    """Create a repository with its main worktree and linked worktrees wt-1 and wt-2."""
    repo = Repository("/repo/.git")
    registry.register_main_worktree(repo)
    registry.register_linked_worktree(repo, "wt-1")
    registry.register_linked_worktree(repo, "wt-2")
    return repo


@pytest.fixture
def resolver(registry: WorktreeRegistry) -> ConfigResolver:
    """Create a ConfigResolver over the shared registry."""
    return ConfigResolver(registry)
