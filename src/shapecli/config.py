"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for shapecli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.shapecli/`` on macOS and Windows.  See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~shapecli.models.GlobalConfig`
  JSON file storing generator defaults and the output format.
* **Project config** -- An optional ``./shapecli.json`` holding a partial
  ``GlobalConfig`` for the current directory.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  effective configuration.

All file writes use :func:`atomic_write` (temp file then rename), which the
schema and module writers share.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from shapecli.exceptions import ConfigError
from shapecli.models import GlobalConfig

_APP_NAME = "shapecli"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "shapecli.json"

ENV_PREFIX = "SHAPECLI_PREFIX"
ENV_MAX_DEPTH = "SHAPECLI_MAX_DEPTH"
ENV_WORKERS = "SHAPECLI_WORKERS"
ENV_OUTPUT_DIR = "SHAPECLI_OUTPUT_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform uses XDG Base Directory paths (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, else ``$HOME/<segments>``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/shapecli/`` (default ``~/.config/shapecli/``).
    On macOS/Windows: ``~/.shapecli/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (generated output, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/shapecli/`` (default ``~/.local/share/shapecli/``).
    On macOS/Windows: ``~/.shapecli/data/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically.

    The temporary file is created next to *path* so that ``os.replace`` is
    an atomic rename on POSIX.  On any failure the temporary file is
    removed and the original, if any, is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    handle = None
    tmp_path: Optional[str] = None
    try:
        handle = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = handle.name
        handle.write(data)
        handle.flush()
        os.fsync(handle.fileno())
        handle.close()
        handle = None
        os.replace(tmp_path, path)
    except BaseException:
        if handle is not None:
            handle.close()
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# --- Global config ---


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The stored :class:`~shapecli.models.GlobalConfig`, or defaults when
        the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically."""
    data = config.model_dump(mode="json")
    atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./shapecli.json`` from the working directory.

    The file holds any subset of the global config, e.g.
    ``{"generator": {"command_prefix": "awsx"}, "output_dir": "nu"}``.

    Returns:
        The parsed mapping, or ``None`` when the file does not exist.

    Raises:
        ConfigError: If the file is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_prefix: Optional[str] = None,
    cli_max_depth: Optional[int] = None,
    cli_workers: Optional[int] = None,
    cli_output_dir: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``SHAPECLI_PREFIX``, ``SHAPECLI_MAX_DEPTH``,
           ``SHAPECLI_WORKERS``, ``SHAPECLI_OUTPUT_DIR``)
        3. Project config (``./shapecli.json``)
        4. User config (``~/.config/shapecli/config.json``)
        5. Defaults

    A max depth of ``0`` means unbounded.

    Raises:
        ConfigError: If a config file or environment value is invalid.
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        _deep_merge(data, project)

    generator = data.setdefault("generator", {})
    env_prefix = os.environ.get(ENV_PREFIX)
    if env_prefix:
        generator["command_prefix"] = env_prefix
    env_depth = _env_int(ENV_MAX_DEPTH)
    if env_depth is not None:
        generator["max_depth"] = env_depth
    env_workers = _env_int(ENV_WORKERS)
    if env_workers is not None:
        generator["workers"] = env_workers
    env_output_dir = os.environ.get(ENV_OUTPUT_DIR)
    if env_output_dir:
        data["output_dir"] = env_output_dir

    if cli_prefix is not None:
        generator["command_prefix"] = cli_prefix
    if cli_max_depth is not None:
        generator["max_depth"] = cli_max_depth
    if cli_workers is not None:
        generator["workers"] = cli_workers
    if cli_output_dir is not None:
        data["output_dir"] = cli_output_dir
    if cli_format is not None:
        data.setdefault("output", {})["format"] = cli_format

    if generator.get("max_depth") == 0:
        generator["max_depth"] = None

    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def resolve_output_dir(config: GlobalConfig) -> Path:
    """Directory for generated files: the configured one, else ``<data_dir>/generated``."""
    if config.output_dir:
        return Path(config.output_dir).expanduser()
    return get_data_dir() / "generated"


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"Environment variable {name} must be an integer, got: {raw}") from None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
