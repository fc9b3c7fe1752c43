"""Config commands -- view and modify the fzfkit configuration file.

Provides the ``fzfkit config`` sub-command group for reading, updating,
and resetting :class:`~fzfkit.models.GlobalConfig`. Changes take effect
the next time the shell evaluates ``fzfkit init``.
"""

from __future__ import annotations

import typer

from fzfkit.output import error, format_response, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration.

    Example::

        fzfkit config show
        fzfkit --json config show
    """
    from fzfkit.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("path")
def config_path() -> None:
    """Print the path of the configuration file."""
    from fzfkit.config import global_config_path

    print_data(str(global_config_path()))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'tools.finder' or 'aliases.ff')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to the existing
    field's type (bool, int, list, or str); list fields take a
    comma-separated value. Keys under ``aliases`` may be new, since that
    section is a free-form mapping.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        fzfkit config set tools.finder fdfind
        fzfkit config set finder.exclude .git,node_modules
        fzfkit config set preview.tree_max_lines 100
        fzfkit config set aliases.fp "fzf --preview 'bat {}'"
    """
    from fzfkit.config import load_global_config, save_global_config
    from fzfkit.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    free_form = keys[:-1] == ["aliases"]
    if final_key not in target and not free_form:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target.get(final_key)
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    elif isinstance(current, list):
        coerced = [item.strip() for item in value.split(",") if item.strip()]
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except Exception as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.
    """
    from fzfkit.config import save_global_config
    from fzfkit.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
