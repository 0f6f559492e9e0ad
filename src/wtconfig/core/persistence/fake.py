"""Fake configuration persistence for testing.

FakeConfigPersistence is an in-memory implementation that accepts pre-configured
state per repository in its constructor. No filesystem access.
"""

from pathlib import Path

from wtconfig.core.errors import StorageFailure
from wtconfig.core.persistence.abc import ConfigPersistence
from wtconfig.core.scope_store import Scope, ScopeStore


class FakeConfigPersistence(ConfigPersistence):
    """In-memory fake implementation - no filesystem access.

    Stores keep copies, so changes made to a store after saving it are only
    visible here once it is saved again. Every save is recorded for assertions.
    """

    def __init__(
        self,
        *,
        shared: dict[Path, ScopeStore] | None = None,
        worktrees: dict[Path, dict[str, ScopeStore]] | None = None,
        linked_worktrees: dict[Path, list[str]] | None = None,
        fail_on_save: bool = False,
    ) -> None:
        """Create fake with optional pre-configured state per repository.

        Args:
            shared: Initial shared stores keyed by git_dir
            worktrees: Initial worktree stores keyed by git_dir, then identity
            linked_worktrees: Existing linked worktree identities keyed by git_dir
            fail_on_save: Make every save raise StorageFailure

        Example:
            >>> store = ScopeStore(Scope.SHARED)
            >>> store.set("extensions.worktreeConfig", "true")
            >>> fake = FakeConfigPersistence(
            ...     shared={Path("/repo/.git"): store},
            ...     linked_worktrees={Path("/repo/.git"): ["wt-1", "wt-2"]},
            ... )
        """
        self._shared = {
            git_dir: store.copy() for git_dir, store in (shared or {}).items()
        }
        self._worktrees = {
            git_dir: {identity: store.copy() for identity, store in stores.items()}
            for git_dir, stores in (worktrees or {}).items()
        }
        self._linked_worktrees = {
            git_dir: list(identities) for git_dir, identities in (linked_worktrees or {}).items()
        }
        self._fail_on_save = fail_on_save
        self._saved: list[tuple[Path, str | None]] = []

    @property
    def saved(self) -> list[tuple[Path, str | None]]:
        """(git_dir, identity) for every save, identity None for shared saves."""
        return list(self._saved)

    def stored_worktree(self, git_dir: Path, identity: str) -> ScopeStore | None:
        """Current stored copy of a worktree store, for test assertions."""
        return self._worktrees.get(git_dir, {}).get(identity)

    def stored_shared(self, git_dir: Path) -> ScopeStore | None:
        """Current stored copy of the shared store, for test assertions."""
        return self._shared.get(git_dir)

    def remove_linked_worktree(self, git_dir: Path, identity: str) -> None:
        """Simulate a worktree checkout disappearing."""
        self._linked_worktrees.get(git_dir, []).remove(identity)

    def load_shared(self, git_dir: Path) -> ScopeStore:
        store = self._shared.get(git_dir)
        if store is None:
            return ScopeStore(Scope.SHARED)
        return store.copy()

    def load_worktree(self, git_dir: Path, identity: str) -> ScopeStore | None:
        store = self.stored_worktree(git_dir, identity)
        if store is None:
            return None
        return store.copy()

    def save_shared(self, git_dir: Path, store: ScopeStore) -> None:
        self._check_writable(git_dir)
        self._shared[git_dir] = store.copy()
        self._saved.append((git_dir, None))

    def save_worktree(self, git_dir: Path, identity: str, store: ScopeStore) -> None:
        self._check_writable(git_dir)
        self._worktrees.setdefault(git_dir, {})[identity] = store.copy()
        self._saved.append((git_dir, identity))

    def delete_worktree(self, git_dir: Path, identity: str) -> bool:
        return self._worktrees.get(git_dir, {}).pop(identity, None) is not None

    def list_worktree_stores(self, git_dir: Path) -> list[str]:
        return list(self._worktrees.get(git_dir, {}))

    def list_linked_worktrees(self, git_dir: Path) -> list[str]:
        return list(self._linked_worktrees.get(git_dir, []))

    def _check_writable(self, git_dir: Path) -> None:
        if self._fail_on_save:
            raise StorageFailure(str(git_dir), "Simulated storage failure")
