"""Configuration loader for the command line.

Reads plugin options from a JSON file (default: bundle-license.json in the
current directory). Files ending in ``.yaml``/``.yml`` are read with PyYAML.
The option values themselves are checked by :mod:`bundle_license.options`;
this module only makes sure the file holds a top-level object.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_NAME = "bundle-license.json"
CONFIG_PATH_ENV_VAR = "BUNDLE_LICENSE_CONFIG"
YAML_SUFFIXES = (".yaml", ".yml")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be loaded or is invalid."""


def _resolve_config_path(path: Path | str | None = None) -> Path:
    """Resolve the configuration file path.

    Priority:
    1. Explicit path argument
    2. BUNDLE_LICENSE_CONFIG environment variable
    3. bundle-license.json in the current directory
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)

    return Path.cwd() / DEFAULT_CONFIG_NAME


def _parse(config_path: Path, content: str) -> Any:
    if config_path.suffix.lower() in YAML_SUFFIXES:
        import yaml

        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in configuration file: {exc}") from exc

    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in configuration file: {exc}") from exc


def load_options(path: Path | str | None = None, required: bool = False) -> dict[str, Any]:
    """Load plugin options from a JSON or YAML file.

    Args:
        path: Optional path to the config file. If not provided, uses the
            BUNDLE_LICENSE_CONFIG env var or falls back to bundle-license.json.
        required: raise when the file is missing instead of returning no options.
            An explicit ``path`` is always required.

    Returns:
        The option mapping, or an empty dict when no file was found.

    Raises:
        ConfigError: If the file cannot be read or contains invalid data.
    """
    config_path = _resolve_config_path(path)

    if not config_path.exists():
        if required or path is not None:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return {}

    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file: {exc}") from exc

    data = _parse(config_path, content)
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be an object")

    return data
