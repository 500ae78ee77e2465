"""Config commands -- view and modify global configuration.

Provides the ``shapecli config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~shapecli.models.GlobalConfig`).  ``show`` prints the effective
configuration after project, environment, and default layering.
"""

from __future__ import annotations

import json

import typer

from shapecli.exceptions import ShapecliError
from shapecli.output import error, info, print_record, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Example::

        shapecli config show
        shapecli --json config show
    """
    from shapecli.config import global_config_path, resolve_config

    try:
        config = resolve_config()
    except ShapecliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config file: {global_config_path()}")
    print_record(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'generator.max_depth')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys.  The value is coerced to the type of
    the current value (bool, int, or str); ``none`` clears an optional
    setting, and mapping settings take a JSON object.  The result is
    validated before it is saved.

    Raises:
        typer.Exit: With code 2 if the key is unknown, the value cannot be
            coerced, or validation fails.

    Example::

        shapecli config set generator.command_prefix awsx
        shapecli config set generator.workers 4
        shapecli config set output_dir ~/.config/nushell/aws
    """
    from shapecli.config import load_global_config, save_global_config
    from shapecli.models import GlobalConfig

    try:
        config = load_global_config()
    except ShapecliError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object
    if value.lower() in ("none", "null"):
        coerced = None
    elif isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    elif isinstance(current, dict):
        try:
            coerced = json.loads(value)
        except json.JSONDecodeError:
            error(f"Expected a JSON object for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip the confirmation prompt."),
) -> None:
    """Reset configuration to defaults.

    Example::

        shapecli config reset --force
    """
    from shapecli.config import save_global_config
    from shapecli.models import GlobalConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
