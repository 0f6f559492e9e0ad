"""Show and change wtconfig's own settings (~/.wtconfig/config.toml)."""

import click

from wtconfig.cli.ensure import Ensure
from wtconfig.cli.error_boundary import cli_error_boundary
from wtconfig.cli.output import machine_output, user_output
from wtconfig.core.context import WtConfigContext
from wtconfig.core.global_config import GlobalConfig
from wtconfig.core.scope_store import Scope

SETTING_NAMES = ("default_scope", "show_origin")


def _parse_boolean_value(value: str, field_name: str) -> bool:
    """Parse "true" or "false" (case-insensitive), exiting on anything else."""
    Ensure.invariant(
        value.lower() in ("true", "false"), f"Invalid boolean value for {field_name}: {value}"
    )
    return value.lower() == "true"


def _update_setting(current: GlobalConfig, field_name: str, value: str) -> GlobalConfig:
    """Return a new GlobalConfig with one field changed.

    Raises:
        SystemExit: If the field name or value is invalid
    """
    match field_name:
        case "default_scope":
            valid_scopes = [scope.value for scope in Scope]
            Ensure.invariant(
                value in valid_scopes,
                f"Invalid default_scope: {value} (expected one of: {', '.join(valid_scopes)})",
            )
            return GlobalConfig(default_scope=Scope(value), show_origin=current.show_origin)
        case "show_origin":
            return GlobalConfig(
                default_scope=current.default_scope,
                show_origin=_parse_boolean_value(value, field_name),
            )
        case _:
            user_output(click.style("Error: ", fg="red") + f"Invalid setting: {field_name}")
            raise SystemExit(1)


def _format_setting(config: GlobalConfig, field_name: str) -> str:
    if field_name == "default_scope":
        return config.default_scope.value
    return str(config.show_origin).lower()


@click.group("settings")
def settings_group() -> None:
    """Manage wtconfig's own settings."""
    pass


@settings_group.command("list")
@click.pass_obj
@cli_error_boundary
def settings_list(ctx: WtConfigContext) -> None:
    """Print every setting and its value."""
    config = ctx.config_store.load()
    for field_name in SETTING_NAMES:
        machine_output(f"{field_name}={_format_setting(config, field_name)}")
    if not ctx.config_store.exists():
        user_output(f"(defaults, no settings file at {ctx.config_store.path()})")


@settings_group.command("get")
@click.argument("name", metavar="NAME")
@click.pass_obj
@cli_error_boundary
def settings_get(ctx: WtConfigContext, name: str) -> None:
    """Print the value of one setting."""
    Ensure.invariant(name in SETTING_NAMES, f"Invalid setting: {name}")
    machine_output(_format_setting(ctx.config_store.load(), name))


@settings_group.command("set")
@click.argument("name", metavar="NAME")
@click.argument("value", metavar="VALUE")
@click.pass_obj
@cli_error_boundary
def settings_set(ctx: WtConfigContext, name: str, value: str) -> None:
    """Change one setting and save it to the settings file."""
    updated = _update_setting(ctx.config_store.load(), name, value)
    ctx.config_store.save(updated)
    user_output(f"Set {name}={_format_setting(updated, name)} in {ctx.config_store.path()}")
