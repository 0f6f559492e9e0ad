"""Read and write repository and worktree configuration."""

from collections.abc import Callable
from typing import Any

import click

from wtconfig.cli.ensure import Ensure
from wtconfig.cli.error_boundary import cli_error_boundary
from wtconfig.cli.json_output import emit_json
from wtconfig.cli.json_schemas import ConfigListResponse, ResolvedEntry
from wtconfig.cli.output import machine_output, user_output
from wtconfig.core.context import WtConfigContext
from wtconfig.core.extension_gate import ExtensionGate
from wtconfig.core.keys import parse_bool
from wtconfig.core.resolver import NotFound, Provenance
from wtconfig.core.scope_store import Scope, WriteMode


def _pick_scope(ctx: WtConfigContext, shared: bool, worktree: bool) -> Scope:
    Ensure.invariant(not (shared and worktree), "--shared and --worktree are mutually exclusive")
    if shared:
        return Scope.SHARED
    if worktree:
        return Scope.WORKTREE
    return ctx.global_config.default_scope


def _format_origin(provenance: Provenance) -> str:
    if provenance.scope is Scope.SHARED:
        return "shared"
    return f"worktree:{provenance.worktree}"


def _scope_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "--worktree", "worktree_scope", is_flag=True, help="Use the current worktree's scope."
    )(func)
    func = click.option("--shared", is_flag=True, help="Use the repository-wide scope.")(func)
    return func


@click.group("config")
def config_group() -> None:
    """Manage repository and worktree configuration."""
    pass


@config_group.command("get")
@click.argument("key")
@click.option("--all", "all_values", is_flag=True, help="Print every declared value.")
@click.option("--bool", "as_bool", is_flag=True, help="Interpret the value as a boolean.")
@click.option(
    "--show-origin/--no-show-origin",
    default=None,
    help="Prefix values with the scope they came from.",
)
@click.option("--json", "output_json", is_flag=True, help="Output JSON format")
@click.pass_obj
@cli_error_boundary
def get_cmd(
    ctx: WtConfigContext,
    key: str,
    all_values: bool,
    as_bool: bool,
    show_origin: bool | None,
    output_json: bool,
) -> None:
    """Print the effective value of KEY in the current worktree.

    Exits with status 1 and prints nothing when KEY is not set.
    """
    repo = Ensure.in_repo(ctx)
    service = ctx.config_service()
    repository = service.open_repository(repo.git_dir)

    result = service.get(repository, repo.worktree, key)
    if isinstance(result, NotFound):
        raise SystemExit(1)

    if output_json:
        emit_json(ResolvedEntry.from_resolved(result).model_dump(mode="json"))
        return

    values = list(result.values) if all_values else [result.value]
    if as_bool:
        converted = []
        for value in values:
            parsed = Ensure.not_none(
                parse_bool(value), f"Value '{value}' of {result.key} is not a boolean"
            )
            converted.append("true" if parsed else "false")
        values = converted

    if show_origin is None:
        show_origin = ctx.global_config.show_origin
    for value in values:
        if show_origin:
            machine_output(f"{_format_origin(result.provenance)}\t{value}")
        else:
            machine_output(value)


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@_scope_options
@click.option("--add", is_flag=True, help="Append VALUE instead of replacing existing values.")
@click.pass_obj
@cli_error_boundary
def set_cmd(
    ctx: WtConfigContext, key: str, value: str, shared: bool, worktree_scope: bool, add: bool
) -> None:
    """Set KEY to VALUE in the repository or current worktree scope."""
    repo = Ensure.in_repo(ctx)
    scope = _pick_scope(ctx, shared, worktree_scope)
    service = ctx.config_service()
    repository = service.open_repository(repo.git_dir)

    mode = WriteMode.ADD if add else WriteMode.REPLACE
    service.set(repository, repo.worktree, key, value, scope, mode)

    if scope is Scope.WORKTREE and not ExtensionGate.is_enabled(repository):
        user_output(
            click.style("Note: ", fg="yellow")
            + "extensions.worktreeConfig is not enabled; "
            + "the value is stored but ignored until it is."
        )


@config_group.command("unset")
@click.argument("key")
@_scope_options
@click.pass_obj
@cli_error_boundary
def unset_cmd(ctx: WtConfigContext, key: str, shared: bool, worktree_scope: bool) -> None:
    """Remove KEY from the repository or current worktree scope.

    Exits with status 5 when KEY was not set in that scope.
    """
    repo = Ensure.in_repo(ctx)
    scope = _pick_scope(ctx, shared, worktree_scope)
    service = ctx.config_service()
    repository = service.open_repository(repo.git_dir)

    if not service.unset(repository, repo.worktree, key, scope):
        raise SystemExit(5)


@config_group.command("list")
@click.option(
    "--show-origin/--no-show-origin",
    default=None,
    help="Prefix entries with the scope they came from.",
)
@click.option("--json", "output_json", is_flag=True, help="Output JSON format")
@click.pass_obj
@cli_error_boundary
def list_cmd(ctx: WtConfigContext, show_origin: bool | None, output_json: bool) -> None:
    """Show the effective configuration of the current worktree."""
    repo = Ensure.in_repo(ctx)
    service = ctx.config_service()
    repository = service.open_repository(repo.git_dir)
    effective = service.list_effective(repository, repo.worktree)

    if output_json:
        response = ConfigListResponse(
            worktree=repo.worktree,
            worktree_config_enabled=ExtensionGate.is_enabled(repository),
            entries=[ResolvedEntry.from_resolved(resolved) for resolved in effective.values()],
        )
        emit_json(response.model_dump(mode="json"))
        return

    if show_origin is None:
        show_origin = ctx.global_config.show_origin
    for resolved in effective.values():
        for value in resolved.values:
            line = f"{resolved.key}={value}"
            if show_origin:
                line = f"{_format_origin(resolved.provenance)}\t{line}"
            machine_output(line)


@config_group.command("enable-worktree")
@click.pass_obj
@cli_error_boundary
def enable_worktree_cmd(ctx: WtConfigContext) -> None:
    """Turn on per-worktree configuration (extensions.worktreeConfig=true)."""
    repo = Ensure.in_repo(ctx)
    service = ctx.config_service()
    repository = service.open_repository(repo.git_dir)
    service.enable_worktree_config(repository)
    user_output("Enabled worktree-scoped configuration")


@config_group.command("disable-worktree")
@click.pass_obj
@cli_error_boundary
def disable_worktree_cmd(ctx: WtConfigContext) -> None:
    """Turn off per-worktree configuration. Stored worktree values are kept."""
    repo = Ensure.in_repo(ctx)
    service = ctx.config_service()
    repository = service.open_repository(repo.git_dir)
    service.disable_worktree_config(repository)
    user_output("Disabled worktree-scoped configuration")
