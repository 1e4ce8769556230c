"""Configuration loading and precedence resolution.

This module turns the project config file, environment variables and CLI
flags into one :class:`~openapi2ts.models.GenerateConfig`:

* **Project config** -- ``./openapi2ts.json`` in the working directory (or
  an explicit ``--config`` path, JSON or YAML) holding any
  ``GenerateConfig`` field. See :func:`load_project_config`.
* **Environment** -- ``OPENAPI2TS_AUTH`` and ``OPENAPI2TS_HTTP_METHOD``
  for fetch settings that should not live in a committed file.
* **Precedence resolution** -- :func:`resolve_config` merges everything.

The data directory (:func:`get_data_dir`) holds crash logs written by
:func:`openapi2ts.app.main`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from openapi2ts.exceptions import ConfigError, InvalidUsageError
from openapi2ts.models import GenerateConfig

_APP_NAME = "openapi2ts"
_PROJECT_CONFIG_FILENAME = "openapi2ts.json"

ENV_AUTH = "OPENAPI2TS_AUTH"
ENV_HTTP_METHOD = "OPENAPI2TS_HTTP_METHOD"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/openapi2ts/`` (default
    ``~/.local/share/openapi2ts/``). On macOS/Windows: ``~/.openapi2ts/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config(path: Optional[str] = None) -> Optional[dict[str, Any]]:
    """Load the project config file.

    Args:
        path: Explicit config path. When ``None``, ``./openapi2ts.json`` is
            used if it exists.

    Returns:
        The parsed mapping, or ``None`` if no config file applies.

    Raises:
        ConfigError: If an explicit path does not exist, or the file is not
            a valid JSON/YAML mapping.
    """
    if path is None:
        config_path = Path.cwd() / _PROJECT_CONFIG_FILENAME
        if not config_path.is_file():
            return None
    else:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")

    try:
        text = config_path.read_text(encoding="utf-8")
        if config_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid project config at {config_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {config_path}: expected an object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_options: Optional[dict[str, Any]] = None,
    config_path: Optional[str] = None,
) -> GenerateConfig:
    """Resolve the effective generation options.

    Precedence (high to low):
        1. CLI flags (``cli_options``; ``None`` values and unset ``False``
           flags are ignored)
        2. Environment variables (``OPENAPI2TS_AUTH``,
           ``OPENAPI2TS_HTTP_METHOD``)
        3. Project config (``./openapi2ts.json`` or *config_path*)
        4. Defaults

    Returns:
        The validated :class:`~openapi2ts.models.GenerateConfig`.

    Raises:
        ConfigError: If the merged values fail validation.
    """
    # 4 + 3. Defaults, then project config
    merged: dict[str, Any] = dict(load_project_config(config_path) or {})

    # 2. Environment variables
    env_auth = os.environ.get(ENV_AUTH)
    if env_auth:
        merged["auth"] = env_auth
    env_method = os.environ.get(ENV_HTTP_METHOD)
    if env_method:
        merged["http_method"] = env_method

    # 1. CLI flags (highest precedence)
    for key, value in (cli_options or {}).items():
        if value is None or value is False:
            continue
        if key == "http_headers":
            if value:
                merged["http_headers"] = {**merged.get("http_headers", {}), **value}
            continue
        merged[key] = value

    try:
        return GenerateConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def parse_header_options(values: Optional[list[str]]) -> dict[str, str]:
    """Parse repeated ``--header "Name: value"`` options into a mapping.

    Raises:
        InvalidUsageError: If a value has no ``:`` separator or an empty name.
    """
    headers: dict[str, str] = {}
    for raw in values or []:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise InvalidUsageError(f"Invalid header '{raw}'. Expected 'Name: value'.")
        headers[name.strip()] = value.strip()
    return headers
