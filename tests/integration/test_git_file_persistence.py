"""Tests for GitFileConfigPersistence against real files."""

from pathlib import Path

import pytest

from wtconfig.core.errors import InvalidWorktreeIdentity, StorageFailure
from wtconfig.core.keys import ConfigKey
from wtconfig.core.persistence.real import GitFileConfigPersistence, worktree_config_path
from wtconfig.core.repository import MAIN_WORKTREE
from wtconfig.core.scope_store import Scope, ScopeStore, WriteMode
from wtconfig.core.services.config_service import WorktreeConfigService

SHARED_CONFIG = """\
[core]
\trepositoryformatversion = 1
\tbare = false
[extensions]
\tworktreeConfig = true
[remote "origin"]
\turl = https://example.com/repo.git
\tfetch = +refs/heads/*:refs/remotes/origin/*
\tfetch = +refs/tags/*:refs/tags/*
"""


@pytest.fixture
def git_dir(tmp_path: Path) -> Path:
    git_dir = tmp_path / "repo" / ".git"
    git_dir.mkdir(parents=True)
    return git_dir


@pytest.fixture
def persistence() -> GitFileConfigPersistence:
    return GitFileConfigPersistence()


def _add_worktree(
    git_dir: Path, identity: str, checkout: Path, create_checkout: bool = True
) -> Path:
    admin_dir = git_dir / "worktrees" / identity
    admin_dir.mkdir(parents=True)
    (admin_dir / "gitdir").write_text(f"{checkout / '.git'}\n", encoding="utf-8")
    if create_checkout:
        checkout.mkdir(parents=True)
        (checkout / ".git").write_text(f"gitdir: {admin_dir}\n", encoding="utf-8")
    return admin_dir


def test_load_shared_reads_git_config(git_dir: Path, persistence: GitFileConfigPersistence) -> None:
    """Sections, subsections, casing and repeated keys are all read."""
    (git_dir / "config").write_text(SHARED_CONFIG, encoding="utf-8")

    store = persistence.load_shared(git_dir)

    assert store.scope is Scope.SHARED
    flag = store.get("extensions.worktreeconfig")
    assert flag is not None
    assert flag.last == "true"
    assert "extensions.worktreeConfig" in [str(key) for key in store.keys()]
    fetch = store.get("remote.origin.fetch")
    assert fetch is not None
    assert fetch.values == ("+refs/heads/*:refs/remotes/origin/*", "+refs/tags/*:refs/tags/*")


def test_missing_files_load_empty(git_dir: Path, persistence: GitFileConfigPersistence) -> None:
    assert len(persistence.load_shared(git_dir)) == 0
    assert persistence.load_worktree(git_dir, MAIN_WORKTREE) is None
    assert persistence.load_worktree(git_dir, "wt-1") is None


def test_shared_round_trip(git_dir: Path, persistence: GitFileConfigPersistence) -> None:
    """Saving and reloading keeps casing and multi-value order."""
    store = ScopeStore(Scope.SHARED)
    store.set("extensions.worktreeConfig", "true")
    store.set("remote.Origin.fetch", "a")
    store.set("remote.Origin.fetch", "b", WriteMode.ADD)

    persistence.save_shared(git_dir, store)
    reloaded = persistence.load_shared(git_dir)

    assert reloaded.items() == store.items()
    assert {str(key) for key in reloaded.keys()} == {
        "extensions.worktreeConfig",
        "remote.Origin.fetch",
    }


def test_worktree_layout(git_dir: Path, persistence: GitFileConfigPersistence) -> None:
    """Main and linked worktree stores land where git keeps them."""
    main = ScopeStore(Scope.WORKTREE, MAIN_WORKTREE)
    main.set("worktree.setting", "set in the main worktree")
    linked = ScopeStore(Scope.WORKTREE, "wt-1")
    linked.set("worktree.setting", "set in wt-1")

    persistence.save_worktree(git_dir, MAIN_WORKTREE, main)
    persistence.save_worktree(git_dir, "wt-1", linked)

    assert (git_dir / "config.worktree").is_file()
    assert (git_dir / "worktrees" / "wt-1" / "config.worktree").is_file()
    expected = git_dir / "worktrees" / "wt-1" / "config.worktree"
    assert worktree_config_path(git_dir, "wt-1") == expected
    assert persistence.list_worktree_stores(git_dir) == [MAIN_WORKTREE, "wt-1"]

    reloaded = persistence.load_worktree(git_dir, "wt-1")
    assert reloaded is not None
    assert reloaded.worktree == "wt-1"
    value = reloaded.get(ConfigKey.parse("worktree.setting"))
    assert value is not None
    assert value.last == "set in wt-1"


def test_written_file_is_git_syntax(git_dir: Path, persistence: GitFileConfigPersistence) -> None:
    store = ScopeStore(Scope.WORKTREE, MAIN_WORKTREE)
    store.set("worktree.setting", "set in the main worktree")

    persistence.save_worktree(git_dir, MAIN_WORKTREE, store)

    content = (git_dir / "config.worktree").read_text(encoding="utf-8")
    assert "[worktree]" in content
    assert "setting = set in the main worktree" in content


def test_delete_worktree(git_dir: Path, persistence: GitFileConfigPersistence) -> None:
    store = ScopeStore(Scope.WORKTREE, "wt-1")
    store.set("worktree.setting", "x")
    persistence.save_worktree(git_dir, "wt-1", store)

    assert persistence.delete_worktree(git_dir, "wt-1") is True
    assert persistence.delete_worktree(git_dir, "wt-1") is False
    assert persistence.list_worktree_stores(git_dir) == []


def test_list_linked_worktrees_skips_prunable(
    tmp_path: Path, git_dir: Path, persistence: GitFileConfigPersistence
) -> None:
    """Worktrees whose checkout vanished are not listed."""
    _add_worktree(git_dir, "wt-1", tmp_path / "wt-1")
    _add_worktree(git_dir, "wt-2", tmp_path / "wt-2", create_checkout=False)

    assert persistence.list_linked_worktrees(git_dir) == ["wt-1"]


def test_no_worktrees_dir(git_dir: Path, persistence: GitFileConfigPersistence) -> None:
    assert persistence.list_linked_worktrees(git_dir) == []
    assert persistence.list_worktree_stores(git_dir) == []


def test_locked_file_raises_storage_failure(
    git_dir: Path, persistence: GitFileConfigPersistence
) -> None:
    """A held lock file surfaces as StorageFailure and leaves the file untouched."""
    (git_dir / "config").write_text(SHARED_CONFIG, encoding="utf-8")
    (git_dir / "config.lock").write_text("", encoding="utf-8")
    store = ScopeStore(Scope.SHARED)
    store.set("core.bare", "true")

    with pytest.raises(StorageFailure, match="locked"):
        persistence.save_shared(git_dir, store)

    assert (git_dir / "config").read_text(encoding="utf-8") == SHARED_CONFIG


def test_include_is_kept_but_not_expanded(
    tmp_path: Path, git_dir: Path, persistence: GitFileConfigPersistence
) -> None:
    """Saving never copies an included file's values into the config file."""
    extra = tmp_path / "extra.cfg"
    extra.write_text("[user]\n\tname = Included\n", encoding="utf-8")
    (git_dir / "config").write_text(
        f"[include]\n\tpath = {extra}\n[core]\n\tbare = true\n", encoding="utf-8"
    )
    service = WorktreeConfigService(persistence)
    repository = service.open_repository(git_dir)

    service.set(repository, MAIN_WORKTREE, "core.bare", "false", Scope.SHARED)

    content = (git_dir / "config").read_text(encoding="utf-8")
    assert "Included" not in content
    assert f"path = {extra}" in content
    assert "bare = false" in content
    assert repository.shared.get("user.name") is None
    assert extra.read_text(encoding="utf-8") == "[user]\n\tname = Included\n"


def test_save_edits_only_changed_keys(
    git_dir: Path, persistence: GitFileConfigPersistence
) -> None:
    """Untouched keys keep their section and position; emptied sections stay."""
    (git_dir / "config").write_text(
        "[core]\n\tbare = false\n"
        '[remote "origin"]\n\turl = https://example.com/repo.git\n\tfetch = a\n\tfetch = b\n'
        "[user]\n\tname = Ada\n",
        encoding="utf-8",
    )
    service = WorktreeConfigService(persistence)
    repository = service.open_repository(git_dir)

    service.set(repository, MAIN_WORKTREE, "user.name", "Grace", Scope.SHARED)
    service.unset(repository, MAIN_WORKTREE, "core.bare", Scope.SHARED)

    assert (git_dir / "config").read_text(encoding="utf-8") == (
        "[core]\n"
        '[remote "origin"]\n\turl = https://example.com/repo.git\n\tfetch = a\n\tfetch = b\n'
        "[user]\n\tname = Grace\n"
    )


def test_subsections_differing_in_case_survive_unrelated_saves(
    git_dir: Path, persistence: GitFileConfigPersistence
) -> None:
    """Such subsections load as one key but stay separate on disk until it is written."""
    (git_dir / "config").write_text(
        '[remote "A"]\n\turl = x\n[remote "a"]\n\turl = y\n', encoding="utf-8"
    )

    store = persistence.load_shared(git_dir)
    merged = store.get("remote.a.url")
    assert merged is not None
    assert merged.values == ("x", "y")

    store.set("core.bare", "false")
    persistence.save_shared(git_dir, store)

    content = (git_dir / "config").read_text(encoding="utf-8")
    assert '[remote "A"]\n\turl = x\n' in content
    assert '[remote "a"]\n\turl = y\n' in content


def test_non_utf8_file_raises_storage_failure(
    git_dir: Path, persistence: GitFileConfigPersistence
) -> None:
    (git_dir / "config").write_bytes(b"[user]\n\tname = Ren\xe9\n")

    with pytest.raises(StorageFailure, match="not valid utf-8"):
        persistence.load_shared(git_dir)


@pytest.mark.parametrize("identity", ["..", ".", "", "../wt-1", "wt-1/..", "a\\b"])
def test_worktree_paths_stay_inside_git_dir(git_dir: Path, identity: str) -> None:
    with pytest.raises(InvalidWorktreeIdentity):
        worktree_config_path(git_dir, identity)


def test_purge_cannot_reach_main_worktree_store(
    tmp_path: Path, git_dir: Path, persistence: GitFileConfigPersistence
) -> None:
    """A dot-dot identity is refused instead of resolving to the main worktree's file."""
    _add_worktree(git_dir, "wt-1", tmp_path / "wt-1")
    main = ScopeStore(Scope.WORKTREE, MAIN_WORKTREE)
    main.set("worktree.setting", "set in the main worktree")
    persistence.save_worktree(git_dir, MAIN_WORKTREE, main)
    service = WorktreeConfigService(persistence)
    repository = service.open_repository(git_dir)

    with pytest.raises(InvalidWorktreeIdentity):
        service.purge_worktree(repository, "..")

    assert (git_dir / "config.worktree").is_file()
