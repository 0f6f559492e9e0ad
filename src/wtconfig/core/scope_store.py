"""A single layer of key/value configuration.

A ScopeStore belongs to exactly one scope instance: the repository's shared
configuration or one worktree's private configuration. Values are ordered
sequences because git allows a key to be declared several times.
"""

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from wtconfig.core.keys import ConfigKey, as_key


class Scope(Enum):
    """Where a configuration value lives."""

    SHARED = "shared"
    WORKTREE = "worktree"


class WriteMode(Enum):
    """How ``ScopeStore.set`` treats existing values of a key."""

    REPLACE = "replace"
    ADD = "add"


@dataclass(frozen=True)
class ConfigValue:
    """Ordered values declared for one key inside one scope."""

    values: tuple[str, ...]

    @property
    def last(self) -> str:
        """The value scalar reads use ("last one wins")."""
        return self.values[-1]


class ScopeStore:
    """Ordered, case-insensitive key/value layer for one scope instance.

    Each write holds the store's lock for its whole duration, so concurrent
    writers race last-write-wins but never leave a key half-written.
    """

    def __init__(self, scope: Scope, worktree: str | None = None) -> None:
        """Create an empty store.

        Args:
            scope: Which kind of scope this store holds
            worktree: Owning worktree identity (None for the shared store)
        """
        if scope is Scope.WORKTREE and worktree is None:
            raise ValueError("A worktree store needs a worktree identity")
        if scope is Scope.SHARED and worktree is not None:
            raise ValueError("The shared store does not belong to a worktree")
        self.scope = scope
        self.worktree = worktree
        self._entries: dict[tuple[str, str | None, str], tuple[ConfigKey, list[str]]] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        owner = f", worktree={self.worktree!r}" if self.worktree is not None else ""
        return f"ScopeStore(scope={self.scope.value}{owner}, keys={len(self._entries)})"

    def set(
        self,
        key: ConfigKey | str,
        values: str | Iterable[str],
        mode: WriteMode = WriteMode.REPLACE,
    ) -> None:
        """Write one or more values for a key.

        REPLACE discards whatever the key held before; ADD appends after the
        existing values.

        Raises:
            InvalidKey: If ``key`` is text that does not parse
            ValueError: If no values are given
        """
        parsed = as_key(key)
        new_values = [values] if isinstance(values, str) else list(values)
        if not new_values:
            raise ValueError(f"No values given for {parsed}")

        with self._lock:
            existing = self._entries.get(parsed.normalized)
            if mode is WriteMode.ADD and existing is not None:
                stored_key, stored_values = existing
                self._entries[parsed.normalized] = (stored_key, stored_values + new_values)
            else:
                self._entries[parsed.normalized] = (parsed, new_values)

    def get(self, key: ConfigKey | str) -> ConfigValue | None:
        """Return the values stored for ``key``, or None if it is absent."""
        parsed = as_key(key)
        entry = self._entries.get(parsed.normalized)
        if entry is None:
            return None
        return ConfigValue(values=tuple(entry[1]))

    def delete(self, key: ConfigKey | str) -> bool:
        """Remove every value of ``key``. Returns whether the key existed."""
        parsed = as_key(key)
        with self._lock:
            return self._entries.pop(parsed.normalized, None) is not None

    def keys(self) -> frozenset[ConfigKey]:
        """Snapshot of the keys currently defined, with their stored casing."""
        return frozenset(stored_key for stored_key, _ in list(self._entries.values()))

    def items(self) -> list[tuple[ConfigKey, ConfigValue]]:
        """Snapshot of all entries in first-declaration order."""
        with self._lock:
            return [
                (stored_key, ConfigValue(values=tuple(stored_values)))
                for stored_key, stored_values in self._entries.values()
            ]

    def copy(self) -> "ScopeStore":
        """Independent copy holding the same entries."""
        duplicate = ScopeStore(self.scope, self.worktree)
        for stored_key, value in self.items():
            duplicate.set(stored_key, value.values, WriteMode.REPLACE)
        return duplicate

    def __len__(self) -> int:
        return len(self._entries)
