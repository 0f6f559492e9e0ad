"""Inspect worktrees and their configuration stores."""

import click

from wtconfig.cli.ensure import Ensure
from wtconfig.cli.error_boundary import cli_error_boundary
from wtconfig.cli.json_output import emit_json
from wtconfig.cli.json_schemas import WorktreeEntry, WorktreeListResponse
from wtconfig.cli.output import machine_output, user_output
from wtconfig.core.context import WtConfigContext
from wtconfig.core.repository import MAIN_WORKTREE


@click.group("wt")
def wt_group() -> None:
    """Inspect worktrees and their configuration."""
    pass


@wt_group.command("list")
@click.option("--json", "output_json", is_flag=True, help="Output JSON format")
@click.pass_obj
@cli_error_boundary
def list_wt(ctx: WtConfigContext, output_json: bool) -> None:
    """List worktrees and whether each has its own configuration.

    The current worktree is marked with '*'. Orphaned configuration (left
    behind by removed worktrees) is listed separately.
    """
    repo = Ensure.in_repo(ctx)
    service = ctx.config_service()
    repository = service.open_repository(repo.git_dir)

    entries = [
        WorktreeEntry(
            identity=identity,
            is_main=identity == MAIN_WORKTREE,
            is_current=identity == repo.worktree,
            has_config=repository.worktree_store(identity) is not None,
        )
        for identity in service.registry.list_worktrees(repository)
    ]
    orphans = service.list_orphans(repository)

    if output_json:
        response = WorktreeListResponse(worktrees=entries, orphans=orphans)
        emit_json(response.model_dump(mode="json"))
        return

    for entry in entries:
        marker = "*" if entry.is_current else " "
        suffix = " (config)" if entry.has_config else ""
        machine_output(f"{marker} {entry.identity}{suffix}")
    for identity in orphans:
        machine_output(f"  {identity} " + click.style("(orphaned config)", fg="yellow"))


@wt_group.command("purge")
@click.argument("identity")
@click.pass_obj
@cli_error_boundary
def purge_wt(ctx: WtConfigContext, identity: str) -> None:
    """Delete configuration left behind by a removed worktree."""
    repo = Ensure.in_repo(ctx)
    service = ctx.config_service()
    repository = service.open_repository(repo.git_dir)

    purged = service.purge_worktree(repository, identity)
    Ensure.invariant(purged, f"No configuration stored for worktree '{identity}'")
    user_output(f"Purged configuration of worktree '{identity}'")
