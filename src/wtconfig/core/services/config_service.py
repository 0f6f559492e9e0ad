"""Service tying the resolver to persistence and worktree discovery.

The resolver works purely in memory. This service loads a repository's stores,
keeps the worktree registry in step with the worktrees that exist, and saves
exactly the store a write touched.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from wtconfig.core.errors import WorktreeStillRegistered
from wtconfig.core.keys import WORKTREE_CONFIG_KEY, ConfigKey
from wtconfig.core.persistence.abc import ConfigPersistence
from wtconfig.core.repository import MAIN_WORKTREE, Repository, check_worktree_identity
from wtconfig.core.resolver import ConfigResolver, NotFound, ResolvedValue
from wtconfig.core.scope_store import Scope, ScopeStore, WriteMode
from wtconfig.core.worktree_registry import WorktreeRegistry

logger = logging.getLogger(__name__)


class WorktreeConfigService:
    """Reads and writes worktree-scoped configuration of on-disk repositories.

    Composes a ConfigPersistence with a WorktreeRegistry and ConfigResolver.
    Repositories are identified by their common git directory.
    """

    def __init__(
        self, persistence: ConfigPersistence, registry: WorktreeRegistry | None = None
    ) -> None:
        """Initialize the service.

        Args:
            persistence: Where stores are loaded from and saved to
            registry: Registry to fill (defaults to a fresh one)
        """
        self._persistence = persistence
        self._registry = registry if registry is not None else WorktreeRegistry()
        self._resolver = ConfigResolver(self._registry)

    @property
    def registry(self) -> WorktreeRegistry:
        return self._registry

    @property
    def resolver(self) -> ConfigResolver:
        return self._resolver

    def open_repository(self, git_dir: Path) -> Repository:
        """Load every stored scope of a repository and register its worktrees.

        Raises:
            StorageFailure: If stored configuration cannot be read
        """
        repository = Repository(str(git_dir), self._persistence.load_shared(git_dir))
        for identity in self._persistence.list_worktree_stores(git_dir):
            store = self._persistence.load_worktree(git_dir, identity)
            if store is not None:
                repository.attach_worktree_store(store)

        self._registry.register_main_worktree(repository)
        self.refresh_worktrees(repository)
        logger.debug(
            "Opened %s with worktree stores %s",
            git_dir,
            repository.worktree_store_ids(),
        )
        return repository

    def refresh_worktrees(self, repository: Repository) -> None:
        """Register newly created linked worktrees and drop vanished ones.

        Stores of vanished worktrees stay in place as orphans.
        """
        live = set(self._persistence.list_linked_worktrees(self._git_dir(repository)))
        known = set(self._registry.list_worktrees(repository)) - {MAIN_WORKTREE}
        for identity in sorted(live - known):
            self._registry.register_linked_worktree(repository, identity)
        for identity in sorted(known - live):
            self._registry.unregister(repository, identity)

    def get(
        self, repository: Repository, worktree: str, key: ConfigKey | str
    ) -> ResolvedValue | NotFound:
        """Resolve a key as seen from ``worktree``."""
        return self._resolver.resolve(repository, worktree, key)

    def set(
        self,
        repository: Repository,
        worktree: str,
        key: ConfigKey | str,
        values: str | Iterable[str],
        scope: Scope,
        mode: WriteMode = WriteMode.REPLACE,
    ) -> None:
        """Write a key to one scope and persist that scope."""
        store = self._resolver.write(repository, worktree, key, values, scope, mode)
        self._save(repository, store)

    def unset(
        self, repository: Repository, worktree: str, key: ConfigKey | str, scope: Scope
    ) -> bool:
        """Remove a key from one scope, persisting only if something changed."""
        removed = self._resolver.unset(repository, worktree, key, scope)
        if removed:
            if scope is Scope.SHARED:
                self._save(repository, repository.shared)
            else:
                store = repository.worktree_store(worktree)
                if store is not None:
                    self._save(repository, store)
        return removed

    def list_effective(
        self, repository: Repository, worktree: str
    ) -> dict[ConfigKey, ResolvedValue]:
        return self._resolver.list_effective(repository, worktree)

    def enable_worktree_config(self, repository: Repository) -> None:
        """Turn on worktree-scoped configuration for the whole repository."""
        self.set(repository, MAIN_WORKTREE, WORKTREE_CONFIG_KEY, "true", Scope.SHARED)

    def disable_worktree_config(self, repository: Repository) -> None:
        """Turn off worktree-scoped configuration; stored worktree values stay."""
        self.set(repository, MAIN_WORKTREE, WORKTREE_CONFIG_KEY, "false", Scope.SHARED)

    def list_orphans(self, repository: Repository) -> list[str]:
        """Identities owning a store without being registered."""
        return [
            identity
            for identity in repository.worktree_store_ids()
            if not self._registry.is_registered(repository, identity)
        ]

    def purge_worktree(self, repository: Repository, identity: str) -> bool:
        """Delete the configuration of a worktree that is no longer registered.

        Returns:
            True if a store existed in memory or on disk

        Raises:
            InvalidWorktreeIdentity: If ``identity`` is not a single directory name
            WorktreeStillRegistered: If ``identity`` is still a registered worktree
        """
        check_worktree_identity(identity)
        if self._registry.is_registered(repository, identity):
            raise WorktreeStillRegistered(repository.repo_id, identity)
        dropped = repository.drop_worktree_store(identity)
        deleted = self._persistence.delete_worktree(self._git_dir(repository), identity)
        logger.debug("%s: purged worktree %s", repository.repo_id, identity)
        return dropped or deleted

    def _save(self, repository: Repository, store: ScopeStore) -> None:
        git_dir = self._git_dir(repository)
        if store.scope is Scope.SHARED:
            self._persistence.save_shared(git_dir, store)
        else:
            assert store.worktree is not None
            self._persistence.save_worktree(git_dir, store.worktree, store)

    def _git_dir(self, repository: Repository) -> Path:
        return Path(repository.repo_id)
