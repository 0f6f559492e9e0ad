"""Configuration persistence in git's on-disk layout.

Layout, relative to the repository's common git directory:

- ``config``: the shared store
- ``config.worktree``: the main worktree's store
- ``worktrees/<id>/config.worktree``: the store of linked worktree ``<id>``

Files are read and written in git-config syntax with dulwich, which keeps key
casing and the order of repeated keys. ``include`` and ``includeIf`` directives
are kept as ordinary keys and never expanded, so a save only ever writes what
the file itself declares. Saves edit the file in place: keys whose values did
not change keep their section and position. Writes go through dulwich's
lock-file writer, so a concurrent writer sees either the old or the new file,
never a mix.
"""

import logging
import os
from pathlib import Path
from typing import IO

from dulwich.config import ConfigFile
from dulwich.file import FileLocked

from wtconfig.core.errors import StorageFailure
from wtconfig.core.keys import ConfigKey
from wtconfig.core.persistence.abc import ConfigPersistence
from wtconfig.core.repository import MAIN_WORKTREE, check_worktree_identity
from wtconfig.core.scope_store import Scope, ScopeStore, WriteMode

logger = logging.getLogger(__name__)

WORKTREE_CONFIG_FILE = "config.worktree"
ENCODING = "utf-8"

Section = tuple[bytes, ...]


def shared_config_path(git_dir: Path) -> Path:
    return git_dir / "config"


def worktree_config_path(git_dir: Path, identity: str) -> Path:
    """Path of a worktree's config file.

    Raises:
        InvalidWorktreeIdentity: If ``identity`` would leave ``worktrees/<id>``
    """
    check_worktree_identity(identity)
    if identity == MAIN_WORKTREE:
        return git_dir / WORKTREE_CONFIG_FILE
    return git_dir / "worktrees" / identity / WORKTREE_CONFIG_FILE


def _skip_include(path: str | os.PathLike[str]) -> IO[bytes]:
    # dulwich ignores includes whose opener raises OSError
    raise OSError(f"not following include {os.fspath(path)}")


def _section_of(key: ConfigKey) -> Section:
    if key.subsection is None:
        return (key.section.encode(ENCODING),)
    return (key.section.encode(ENCODING), key.subsection.encode(ENCODING))


class GitFileConfigPersistence(ConfigPersistence):
    """Production implementation reading and writing git config files."""

    def load_shared(self, git_dir: Path) -> ScopeStore:
        store = ScopeStore(Scope.SHARED)
        self._read_into(shared_config_path(git_dir), store)
        return store

    def load_worktree(self, git_dir: Path, identity: str) -> ScopeStore | None:
        path = worktree_config_path(git_dir, identity)
        if not path.exists():
            return None
        store = ScopeStore(Scope.WORKTREE, identity)
        self._read_into(path, store)
        return store

    def save_shared(self, git_dir: Path, store: ScopeStore) -> None:
        self._write_from(shared_config_path(git_dir), store)

    def save_worktree(self, git_dir: Path, identity: str, store: ScopeStore) -> None:
        self._write_from(worktree_config_path(git_dir, identity), store)

    def delete_worktree(self, git_dir: Path, identity: str) -> bool:
        path = worktree_config_path(git_dir, identity)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise StorageFailure(str(path), "Cannot delete worktree config") from e
        logger.debug("Deleted %s", path)
        return True

    def list_worktree_stores(self, git_dir: Path) -> list[str]:
        identities: list[str] = []
        if worktree_config_path(git_dir, MAIN_WORKTREE).exists():
            identities.append(MAIN_WORKTREE)
        worktrees_dir = git_dir / "worktrees"
        if worktrees_dir.is_dir():
            for admin_dir in sorted(worktrees_dir.iterdir()):
                if (admin_dir / WORKTREE_CONFIG_FILE).is_file():
                    identities.append(admin_dir.name)
        return identities

    def list_linked_worktrees(self, git_dir: Path) -> list[str]:
        worktrees_dir = git_dir / "worktrees"
        if not worktrees_dir.is_dir():
            return []

        identities: list[str] = []
        for admin_dir in sorted(worktrees_dir.iterdir()):
            gitdir_file = admin_dir / "gitdir"
            if not gitdir_file.is_file():
                continue
            # gitdir points at the worktree's .git file; gone means prunable
            checkout_git_file = Path(gitdir_file.read_text(encoding=ENCODING).strip())
            if not checkout_git_file.is_absolute():
                checkout_git_file = (admin_dir / checkout_git_file).resolve()
            if checkout_git_file.exists():
                identities.append(admin_dir.name)
            else:
                logger.debug("Skipping prunable worktree %s", admin_dir.name)
        return identities

    def _parse(self, path: Path) -> ConfigFile:
        try:
            with open(path, "rb") as f:
                return ConfigFile.from_file(f, file_opener=_skip_include)
        except (OSError, ValueError) as e:
            raise StorageFailure(str(path), "Cannot read config file") from e

    def _entries(
        self, path: Path, config: ConfigFile
    ) -> list[tuple[Section, bytes, ConfigKey, str]]:
        """Every declared value as (section, raw name, key, value), in file order."""
        entries: list[tuple[Section, bytes, ConfigKey, str]] = []
        try:
            for section in config.sections():
                section_name = section[0].decode(ENCODING)
                subsection = section[1].decode(ENCODING) if len(section) > 1 else None
                for name, value in config.items(section):
                    # Loaded keys keep whatever git accepted; no re-validation.
                    key = ConfigKey(
                        section=section_name, subsection=subsection, name=name.decode(ENCODING)
                    )
                    entries.append((section, name, key, value.decode(ENCODING)))
        except UnicodeDecodeError as e:
            raise StorageFailure(str(path), f"Config file is not valid {ENCODING}") from e
        return entries

    def _read_into(self, path: Path, store: ScopeStore) -> None:
        if not path.exists():
            return
        for _, _, key, value in self._entries(path, self._parse(path)):
            store.set(key, value, WriteMode.ADD)
        logger.debug("Loaded %d keys from %s", len(store), path)

    def _write_from(self, path: Path, store: ScopeStore) -> None:
        config = self._parse(path) if path.exists() else ConfigFile(encoding=ENCODING)

        on_disk = ScopeStore(store.scope, store.worktree)
        locations: dict[ConfigKey, list[tuple[Section, bytes]]] = {}
        for section, name, key, value in self._entries(path, config):
            on_disk.set(key, value, WriteMode.ADD)
            # dulwich matches section names and key names case-insensitively
            spot = ((section[0].lower(), *section[1:]), name.lower())
            spots = locations.setdefault(key, [])
            if spot not in spots:
                spots.append(spot)

        wanted = dict(store.items())
        changed = 0
        for key, value in on_disk.items():
            if wanted.get(key) != value:
                for section, name in locations[key]:
                    del config[section][name]
        for key, value in wanted.items():
            if on_disk.get(key) == value:
                continue
            for item in value.values:
                config.add(_section_of(key), key.name, item)
            changed += 1

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            config.write_to_path(str(path))
        except FileLocked as e:
            raise StorageFailure(str(path), "Config file is locked by another process") from e
        except OSError as e:
            raise StorageFailure(str(path), "Cannot write config file") from e
        logger.debug("Wrote %s (%d keys changed)", path, changed)
