"""Pydantic models for JSON output schemas.

These models define the validated JSON structures of commands that support
--json output.
"""

from pydantic import BaseModel, ConfigDict, Field

from wtconfig.core.resolver import ResolvedValue


class ResolvedEntry(BaseModel):
    """One resolved key.

    Attributes:
        key: Key name with its casing preserved
        value: Last declared value ("last one wins")
        values: Every declared value in order
        scope: "shared" or "worktree"
        worktree: Worktree identity the value came from (None for shared)
    """

    model_config = ConfigDict(strict=True)

    key: str
    value: str
    values: list[str] = Field(..., min_length=1)
    scope: str = Field(..., pattern="^(shared|worktree)$")
    worktree: str | None

    @staticmethod
    def from_resolved(resolved: ResolvedValue) -> "ResolvedEntry":
        return ResolvedEntry(
            key=str(resolved.key),
            value=resolved.value,
            values=list(resolved.values),
            scope=resolved.provenance.scope.value,
            worktree=resolved.provenance.worktree,
        )


class ConfigListResponse(BaseModel):
    """JSON response schema for `wtconfig config list --json`.

    Attributes:
        worktree: Identity of the worktree the view was resolved for
        worktree_config_enabled: State of extensions.worktreeConfig
        entries: Effective configuration in resolution order
    """

    model_config = ConfigDict(strict=True)

    worktree: str
    worktree_config_enabled: bool
    entries: list[ResolvedEntry]


class WorktreeEntry(BaseModel):
    """One worktree in `wtconfig wt list --json`."""

    model_config = ConfigDict(strict=True)

    identity: str
    is_main: bool
    is_current: bool
    has_config: bool


class WorktreeListResponse(BaseModel):
    """JSON response schema for `wtconfig wt list --json`.

    Attributes:
        worktrees: Registered worktrees, main worktree first
        orphans: Identities with stored configuration but no worktree
    """

    model_config = ConfigDict(strict=True)

    worktrees: list[WorktreeEntry]
    orphans: list[str]
