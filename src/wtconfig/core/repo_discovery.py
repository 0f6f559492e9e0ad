"""Repository and worktree discovery.

Finds the repository's common git directory and the identity of the worktree
containing a given path, using only the files git leaves on disk.
"""

from dataclasses import dataclass
from pathlib import Path

from wtconfig.core.repository import MAIN_WORKTREE

GITDIR_PREFIX = "gitdir:"


@dataclass(frozen=True)
class RepoContext:
    """A worktree checkout and the repository it belongs to."""

    root: Path  # top of the worktree checkout
    git_dir: Path  # common git directory shared by all worktrees
    worktree: str  # MAIN_WORKTREE or the linked worktree's id

    @property
    def is_main_worktree(self) -> bool:
        return self.worktree == MAIN_WORKTREE


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository.

    Commands that require repo context can check for this sentinel and fail fast.
    """

    message: str = "Not inside a git repository"


def discover_repo_or_sentinel(cwd: Path) -> RepoContext | NoRepoSentinel:
    """Walk up from `cwd` to find a `.git` directory or `.git` file.

    A `.git` directory marks the main worktree. A `.git` file holding
    ``gitdir: <common>/worktrees/<id>`` marks linked worktree ``<id>``.

    Args:
        cwd: Current working directory to start search from

    Returns:
        RepoContext if inside a git repository, NoRepoSentinel otherwise
    """
    if not cwd.exists():
        return NoRepoSentinel(message=f"Start path '{cwd}' does not exist")

    cur = cwd.resolve()
    for parent in [cur, *cur.parents]:
        git_path = parent / ".git"
        if git_path.is_dir():
            return RepoContext(root=parent, git_dir=git_path, worktree=MAIN_WORKTREE)
        if git_path.is_file():
            return _linked_worktree_context(parent, git_path)

    return NoRepoSentinel(message="Not inside a git repository (no .git found up the tree)")


def _linked_worktree_context(root: Path, git_file: Path) -> RepoContext | NoRepoSentinel:
    content = git_file.read_text(encoding="utf-8").strip()
    if not content.startswith(GITDIR_PREFIX):
        return NoRepoSentinel(message=f"Malformed .git file at {git_file}")

    admin_dir = Path(content[len(GITDIR_PREFIX) :].strip())
    if not admin_dir.is_absolute():
        admin_dir = (root / admin_dir).resolve()

    commondir_file = admin_dir / "commondir"
    if commondir_file.is_file():
        common_dir = Path(commondir_file.read_text(encoding="utf-8").strip())
        if not common_dir.is_absolute():
            common_dir = (admin_dir / common_dir).resolve()
    else:
        common_dir = admin_dir.parent.parent

    if admin_dir.parent.name != "worktrees":
        # Submodules and separate git dirs also use .git files.
        return RepoContext(root=root, git_dir=admin_dir, worktree=MAIN_WORKTREE)

    return RepoContext(root=root, git_dir=common_dir, worktree=admin_dir.name)
