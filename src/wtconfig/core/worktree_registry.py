"""Tracks which worktree identities belong to which repository."""

import logging
import threading

from wtconfig.core.errors import CannotRemoveMainWorktree, DuplicateWorktree, UnknownWorktree
from wtconfig.core.repository import MAIN_WORKTREE, Repository

logger = logging.getLogger(__name__)


class WorktreeRegistry:
    """Registry of worktree identities per repository.

    Holds identities only. Unregistering a worktree leaves its configuration
    store in the Repository untouched.
    """

    def __init__(self) -> None:
        self._worktrees: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def register_main_worktree(self, repository: Repository) -> str:
        """Register the main worktree of a newly created repository.

        Returns:
            The reserved main worktree identity

        Raises:
            DuplicateWorktree: If the repository was already set up
        """
        with self._lock:
            if repository.repo_id in self._worktrees:
                raise DuplicateWorktree(repository.repo_id, MAIN_WORKTREE)
            self._worktrees[repository.repo_id] = [MAIN_WORKTREE]
        logger.debug("%s: registered main worktree", repository.repo_id)
        return MAIN_WORKTREE

    def register_linked_worktree(self, repository: Repository, identity: str) -> None:
        """Register a linked worktree.

        Raises:
            DuplicateWorktree: If ``identity`` is already registered
        """
        with self._lock:
            identities = self._worktrees.setdefault(repository.repo_id, [])
            if identity in identities:
                raise DuplicateWorktree(repository.repo_id, identity)
            identities.append(identity)
        logger.debug("%s: registered linked worktree %s", repository.repo_id, identity)

    def unregister(self, repository: Repository, identity: str) -> None:
        """Remove a linked worktree's identity.

        Raises:
            CannotRemoveMainWorktree: If ``identity`` is the main worktree
            UnknownWorktree: If ``identity`` is not registered
        """
        if identity == MAIN_WORKTREE:
            raise CannotRemoveMainWorktree(repository.repo_id)
        with self._lock:
            identities = self._worktrees.get(repository.repo_id, [])
            if identity not in identities:
                raise UnknownWorktree(repository.repo_id, identity)
            identities.remove(identity)
        logger.debug("%s: unregistered worktree %s", repository.repo_id, identity)

    def is_registered(self, repository: Repository, identity: str) -> bool:
        return identity in self._worktrees.get(repository.repo_id, [])

    def list_worktrees(self, repository: Repository) -> list[str]:
        """Registered identities, main worktree first."""
        return list(self._worktrees.get(repository.repo_id, []))
