"""``schemacache config`` -- inspect and edit the global config file.

Keys are ``section.field`` pairs taken from
:class:`~schemacache.models.GlobalConfig`, e.g. ``registry.url`` or
``cache.enabled``. Values are parsed with the field's own pydantic type, so
``config set`` accepts exactly what the config file itself would.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from schemacache.exit_codes import EXIT_INVALID_USAGE
from schemacache.output import error, format_response, info, success, warning

config_app = typer.Typer(no_args_is_help=True)

_MASK = "********"
_SECRET_KEYS = frozenset({"registry.password"})


def _split_key(key: str) -> tuple[str, str]:
    """Validate *key* against :class:`GlobalConfig` and return ``(section, field)``."""
    from schemacache.models import GlobalConfig

    section, _, field = key.partition(".")
    section_info = GlobalConfig.model_fields.get(section)
    if section_info is None or not field or "." in field:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)
    if field not in section_info.annotation.model_fields:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)
    return section, field


def _check_registry_url(value: str) -> str:
    import httpx

    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as exc:
        raise ValueError(str(exc)) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError("expected an http:// or https:// URL with a host")
    return value.rstrip("/")


def _display(key: str, value: Any) -> Any:
    return _MASK if key in _SECRET_KEYS and value else value


@config_app.command("show")
def config_show() -> None:
    """Print the global config; the registry password is masked.

    Example::

        schemacache config show
        schemacache --json config show
    """
    from schemacache.config import get_config_dir, load_global_config

    info(f"Config directory: {get_config_dir()}")
    data = load_global_config().model_dump(mode="json")
    for section, fields in data.items():
        for field, value in fields.items():
            fields[field] = _display(f"{section}.{field}", value)
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key, e.g. 'registry.url'."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Set one config value.

    ``registry.url`` must be an http(s) URL; ``cache.directory`` has ``~``
    expanded. Booleans accept true/false, yes/no, on/off and 1/0.

    Example::

        schemacache config set registry.url http://localhost:8081
        schemacache config set registry.max_retries 5
        schemacache config set output.format json
    """
    from pydantic import ValidationError

    from schemacache.config import load_global_config, save_global_config
    from schemacache.models import GlobalConfig

    section, field = _split_key(key)

    try:
        if key == "registry.url":
            value = _check_registry_url(value)
        elif key == "cache.directory":
            value = str(Path(value).expanduser())
        data = load_global_config().model_dump()
        data[section][field] = value
        new_config = GlobalConfig.model_validate(data)
    except (ValidationError, ValueError) as exc:
        error(f"Invalid value for {key}: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    stored = getattr(getattr(new_config, section), field)
    success(f"Set {key} = {_display(key, stored)}")
    if key in _SECRET_KEYS:
        warning("The password is stored unencrypted in the config file.")


@config_app.command("unset")
def config_unset(
    key: str = typer.Argument(help="Config key to restore to its default."),
) -> None:
    """Restore one config value to its default.

    Example::

        schemacache config unset registry.password
    """
    from schemacache.config import load_global_config, save_global_config

    section, field = _split_key(key)
    config = load_global_config()
    section_model = getattr(config, section)
    default = type(section_model).model_fields[field].get_default(call_default_factory=True)
    setattr(section_model, field, default)
    save_global_config(config)
    success(f"Unset {key}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Restore every config value to its default.

    Asks first unless ``--force`` was given. Snapshot files are not touched.
    """
    from schemacache.config import save_global_config
    from schemacache.models import GlobalConfig

    force = bool(ctx.obj and ctx.obj.get("force"))
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
