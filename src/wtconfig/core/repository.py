"""Repository-level ownership of configuration scopes."""

import threading

from wtconfig.core.errors import InvalidWorktreeIdentity
from wtconfig.core.scope_store import Scope, ScopeStore

# Reserved identity of the main worktree. Parentheses never appear in the
# directory names git picks for linked worktrees under .git/worktrees/.
MAIN_WORKTREE = "(main)"


def check_worktree_identity(identity: str) -> None:
    """Reject identities that are not a single directory name.

    Raises:
        InvalidWorktreeIdentity: If ``identity`` is empty, a dot segment, or
            contains a path separator or NUL
    """
    if identity == MAIN_WORKTREE:
        return
    if identity in ("", ".", "..") or any(char in identity for char in "/\\\0"):
        raise InvalidWorktreeIdentity(identity)


class Repository:
    """Owns the shared store and every worktree store of one repository.

    Worktree stores are created lazily on first write and are keyed by
    worktree identity. They outlive the worktree's registration; only
    ``drop_worktree_store`` removes one.
    """

    def __init__(self, repo_id: str, shared: ScopeStore | None = None) -> None:
        if shared is not None and shared.scope is not Scope.SHARED:
            raise ValueError(f"Expected a shared store, got {shared!r}")
        self.repo_id = repo_id
        self._shared = shared if shared is not None else ScopeStore(Scope.SHARED)
        self._worktree_stores: dict[str, ScopeStore] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Repository({self.repo_id!r})"

    @property
    def shared(self) -> ScopeStore:
        return self._shared

    def worktree_store(self, identity: str) -> ScopeStore | None:
        """Return the worktree's store, or None if nothing was ever written to it."""
        return self._worktree_stores.get(identity)

    def ensure_worktree_store(self, identity: str) -> ScopeStore:
        """Return the worktree's store, creating an empty one on first use."""
        with self._lock:
            store = self._worktree_stores.get(identity)
            if store is None:
                store = ScopeStore(Scope.WORKTREE, identity)
                self._worktree_stores[identity] = store
            return store

    def attach_worktree_store(self, store: ScopeStore) -> None:
        """Install a store loaded from persistence, replacing any existing one."""
        if store.scope is not Scope.WORKTREE or store.worktree is None:
            raise ValueError(f"Expected a worktree store, got {store!r}")
        with self._lock:
            self._worktree_stores[store.worktree] = store

    def drop_worktree_store(self, identity: str) -> bool:
        """Forget a worktree's store. Returns whether one existed."""
        with self._lock:
            return self._worktree_stores.pop(identity, None) is not None

    def worktree_store_ids(self) -> list[str]:
        """Identities that currently own a store, in creation order."""
        return list(self._worktree_stores)
