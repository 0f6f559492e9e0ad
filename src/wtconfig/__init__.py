"""wtconfig - worktree-scoped git configuration.

Resolves configuration values for a repository whose worktrees may each carry
their own overrides, gated by the ``extensions.worktreeConfig`` switch.
"""
