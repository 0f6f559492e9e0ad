"""Error taxonomy for configuration resolution.

Every failure here is deterministic given its inputs and is raised straight to
the caller. ``NotFound`` is deliberately absent: a missing key is a result, see
``wtconfig.core.resolver.NotFound``.
"""


class WtConfigError(Exception):
    """Base exception for wtconfig operations."""


class InvalidKey(WtConfigError):
    """Raised when a configuration key does not match section[.subsection].name."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Invalid key '{key}': {reason}")
        self.key = key
        self.reason = reason


class UnknownWorktree(WtConfigError):
    """Raised when a worktree identity is not registered for the repository."""

    def __init__(self, repo_id: str, identity: str) -> None:
        super().__init__(f"Worktree '{identity}' is not registered for repository {repo_id}")
        self.repo_id = repo_id
        self.identity = identity


class DuplicateWorktree(WtConfigError):
    """Raised when registering a worktree identity that already exists."""

    def __init__(self, repo_id: str, identity: str) -> None:
        super().__init__(f"Worktree '{identity}' is already registered for repository {repo_id}")
        self.repo_id = repo_id
        self.identity = identity


class InvalidWorktreeIdentity(WtConfigError):
    """Raised when a worktree identity cannot name a directory under worktrees/."""

    def __init__(self, identity: str) -> None:
        super().__init__(f"Invalid worktree identity '{identity}'")
        self.identity = identity


class CannotRemoveMainWorktree(WtConfigError):
    """Raised when trying to unregister the main worktree."""

    def __init__(self, repo_id: str) -> None:
        super().__init__(f"The main worktree of repository {repo_id} cannot be removed")
        self.repo_id = repo_id


class WorktreeStillRegistered(WtConfigError):
    """Raised when purging the configuration of a worktree that is still registered."""

    def __init__(self, repo_id: str, identity: str) -> None:
        super().__init__(
            f"Worktree '{identity}' is still registered for repository {repo_id}; "
            "only orphaned worktree configuration can be purged"
        )
        self.repo_id = repo_id
        self.identity = identity


class StorageFailure(WtConfigError):
    """Raised by persistence collaborators when reading or writing fails.

    The core never interprets or retries these; the underlying exception is
    chained as ``__cause__``.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path
