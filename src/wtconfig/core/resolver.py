"""Effective configuration for a worktree.

Resolution order, highest precedence first:

1. The worktree's own store, only while ``extensions.worktreeConfig`` is true
2. The repository's shared store

``extensions.worktreeConfig`` itself is always answered from the shared store,
because it decides whether step 1 happens at all.

Writes are never gated: a value written to a worktree store while the switch
is off is kept and becomes visible as soon as the switch is turned on.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from wtconfig.core.errors import UnknownWorktree
from wtconfig.core.extension_gate import ExtensionGate
from wtconfig.core.keys import WORKTREE_CONFIG_KEY, ConfigKey, as_key
from wtconfig.core.repository import Repository
from wtconfig.core.scope_store import ConfigValue, Scope, ScopeStore, WriteMode
from wtconfig.core.worktree_registry import WorktreeRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Provenance:
    """Which store a resolved value came from."""

    scope: Scope
    worktree: str | None = None


@dataclass(frozen=True)
class ResolvedValue:
    """The winning values for a key together with their provenance."""

    key: ConfigKey
    config_value: ConfigValue
    provenance: Provenance

    @property
    def value(self) -> str:
        """Scalar read: the last declared value."""
        return self.config_value.last

    @property
    def values(self) -> tuple[str, ...]:
        """Multi-value read: every declared value in order."""
        return self.config_value.values


@dataclass(frozen=True)
class NotFound:
    """Sentinel result for a key that no participating store defines.

    Distinct from a key whose value is the empty string.
    """

    key: ConfigKey


class ConfigResolver:
    """Answers "effective value of key K in worktree W" for repositories.

    The current worktree is always an explicit argument; the resolver keeps no
    notion of a "current" worktree itself.
    """

    def __init__(self, registry: WorktreeRegistry) -> None:
        self._registry = registry

    def resolve(
        self, repository: Repository, worktree: str, key: ConfigKey | str
    ) -> ResolvedValue | NotFound:
        """Resolve one key as seen from ``worktree``.

        Raises:
            UnknownWorktree: If ``worktree`` is not registered for ``repository``
            InvalidKey: If ``key`` is text that does not parse
        """
        self._ensure_registered(repository, worktree)
        parsed = as_key(key)

        shared_value = repository.shared.get(parsed)
        if parsed != WORKTREE_CONFIG_KEY and ExtensionGate.is_enabled(repository):
            store = repository.worktree_store(worktree)
            worktree_value = store.get(parsed) if store is not None else None
            if worktree_value is not None:
                logger.debug("%s: %s from worktree %s", repository.repo_id, parsed, worktree)
                return ResolvedValue(
                    key=parsed,
                    config_value=worktree_value,
                    provenance=Provenance(scope=Scope.WORKTREE, worktree=worktree),
                )

        if shared_value is None:
            logger.debug("%s: %s not found", repository.repo_id, parsed)
            return NotFound(key=parsed)

        logger.debug("%s: %s from shared config", repository.repo_id, parsed)
        return ResolvedValue(
            key=parsed,
            config_value=shared_value,
            provenance=Provenance(scope=Scope.SHARED),
        )

    def write(
        self,
        repository: Repository,
        worktree: str,
        key: ConfigKey | str,
        values: str | Iterable[str],
        scope: Scope,
        mode: WriteMode = WriteMode.REPLACE,
    ) -> ScopeStore:
        """Write values to the shared store or to ``worktree``'s store.

        Worktree writes succeed whether or not the extension is enabled.

        Returns:
            The store that received the write

        Raises:
            UnknownWorktree: If ``worktree`` is not registered for ``repository``
            InvalidKey: If ``key`` is text that does not parse
        """
        self._ensure_registered(repository, worktree)
        parsed = as_key(key)
        store = self._target_store(repository, worktree, scope)
        store.set(parsed, values, mode)
        logger.debug(
            "%s: wrote %s to %s store (%s)", repository.repo_id, parsed, scope.value, mode.value
        )
        return store

    def unset(
        self, repository: Repository, worktree: str, key: ConfigKey | str, scope: Scope
    ) -> bool:
        """Remove a key from one scope. Returns whether the key was present there.

        Raises:
            UnknownWorktree: If ``worktree`` is not registered for ``repository``
            InvalidKey: If ``key`` is text that does not parse
        """
        self._ensure_registered(repository, worktree)
        parsed = as_key(key)
        if scope is Scope.SHARED:
            return repository.shared.delete(parsed)
        store = repository.worktree_store(worktree)
        if store is None:
            return False
        return store.delete(parsed)

    def list_effective(
        self, repository: Repository, worktree: str
    ) -> dict[ConfigKey, ResolvedValue]:
        """Resolve every key visible from ``worktree``.

        Shared keys come first in declaration order, followed by keys only the
        worktree store defines.

        Raises:
            UnknownWorktree: If ``worktree`` is not registered for ``repository``
        """
        self._ensure_registered(repository, worktree)
        keys = [stored_key for stored_key, _ in repository.shared.items()]
        if ExtensionGate.is_enabled(repository):
            store = repository.worktree_store(worktree)
            if store is not None:
                seen = set(keys)
                keys.extend(stored_key for stored_key, _ in store.items() if stored_key not in seen)

        effective: dict[ConfigKey, ResolvedValue] = {}
        for key in keys:
            result = self.resolve(repository, worktree, key)
            if isinstance(result, ResolvedValue):
                effective[key] = result
        return effective

    def _ensure_registered(self, repository: Repository, worktree: str) -> None:
        if not self._registry.is_registered(repository, worktree):
            raise UnknownWorktree(repository.repo_id, worktree)

    def _target_store(self, repository: Repository, worktree: str, scope: Scope) -> ScopeStore:
        if scope is Scope.SHARED:
            return repository.shared
        return repository.ensure_worktree_store(worktree)
