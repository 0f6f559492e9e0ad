"""The ``extensions.worktreeConfig`` switch."""

import logging

from wtconfig.core.keys import WORKTREE_CONFIG_KEY
from wtconfig.core.repository import Repository

logger = logging.getLogger(__name__)


class ExtensionGate:
    """Decides whether worktree stores take part in resolution.

    The flag has no storage of its own: it is the last value of
    ``extensions.worktreeConfig`` in the repository's shared store, read
    fresh on every call so a toggle applies to the very next query.
    """

    @staticmethod
    def is_enabled(repository: Repository) -> bool:
        value = repository.shared.get(WORKTREE_CONFIG_KEY)
        enabled = value is not None and value.last.lower() == "true"
        logger.debug("%s: worktree config enabled=%s", repository.repo_id, enabled)
        return enabled
