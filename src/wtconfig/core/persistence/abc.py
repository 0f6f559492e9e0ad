"""Abstract interface for configuration persistence.

Architecture:
- ConfigPersistence: Abstract base class defining the interface
- GitFileConfigPersistence: Production implementation using git's file layout
- FakeConfigPersistence: In-memory implementation for tests

Implementations raise StorageFailure for any I/O problem. Callers pass it
through unchanged.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from wtconfig.core.scope_store import ScopeStore


class ConfigPersistence(ABC):
    """Durable storage for one shared store and N worktree stores per repository.

    Repositories are addressed by their common git directory. Worktree stores
    are addressed by worktree identity, with the main worktree using the
    reserved ``MAIN_WORKTREE`` identity.
    """

    @abstractmethod
    def load_shared(self, git_dir: Path) -> ScopeStore:
        """Load the repository's shared store (empty if nothing is stored)."""
        ...

    @abstractmethod
    def load_worktree(self, git_dir: Path, identity: str) -> ScopeStore | None:
        """Load a worktree's store.

        Returns:
            The stored configuration, or None if the worktree has none
        """
        ...

    @abstractmethod
    def save_shared(self, git_dir: Path, store: ScopeStore) -> None:
        """Replace the stored shared configuration with ``store``."""
        ...

    @abstractmethod
    def save_worktree(self, git_dir: Path, identity: str, store: ScopeStore) -> None:
        """Replace a worktree's stored configuration with ``store``."""
        ...

    @abstractmethod
    def delete_worktree(self, git_dir: Path, identity: str) -> bool:
        """Delete a worktree's stored configuration.

        Returns:
            True if something was deleted
        """
        ...

    @abstractmethod
    def list_worktree_stores(self, git_dir: Path) -> list[str]:
        """Identities of every worktree that has stored configuration."""
        ...

    @abstractmethod
    def list_linked_worktrees(self, git_dir: Path) -> list[str]:
        """Identities of the linked worktrees that currently exist.

        This is the worktree lifecycle view used to fill the registry. Worktrees
        whose checkout has disappeared are not listed.
        """
        ...
