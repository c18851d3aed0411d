"""Settings loading for the conversion core.

Settings come from three layers, later ones winning:

1. Built-in defaults
2. An optional YAML file (``playground.yaml`` in the working directory, or an
   explicit path)
3. Environment variables
"""

from __future__ import annotations

import dataclasses
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Mapping

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_NAME: Final[str] = "playground.yaml"

# Environment variable -> settings field
ENV_OVERRIDES: Final[dict[str, str]] = {
    "SCHEMABRIDGE_MODULE_ROOT": "module_root",
    "PLAYGROUND_CONVERSION_TIMEOUT": "conversion_timeout",
    "PLAYGROUND_NODE": "node_command",
    "PLAYGROUND_TEMP_DIR": "temp_dir",
    "PLAYGROUND_LOG_LEVEL": "log_level",
}


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime configuration for a conversion."""

    module_root: Path | None = None
    max_exports: int = 10
    # Must stay below the 30s transport timeout.
    conversion_timeout: float = 25.0
    node_command: str = "node"
    temp_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    sandbox_prefix: str = "sb-playground"
    log_level: str = "INFO"

    def replace(self, **changes: Any) -> Settings:
        return dataclasses.replace(self, **changes)


def _coerce(name: str, value: Any, config_path: str | None) -> Any:
    """Convert a raw YAML/env value to the type of the named field."""
    try:
        if name in ("module_root", "temp_dir"):
            return Path(str(value)).expanduser() if value not in (None, "") else None
        if name == "max_exports":
            number = int(value)
            if number < 1:
                raise ValueError("must be at least 1")
            return number
        if name == "conversion_timeout":
            seconds = float(value)
            if seconds <= 0:
                raise ValueError("must be positive")
            return seconds
        if name == "log_level":
            return str(value).upper()
        return str(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{name}': {e}", config_path) from e


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Read and validate a YAML settings file.

    Raises:
        ConfigError: If the file cannot be read, parsed, or has unknown keys.
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read settings file: {e}", str(config_path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", str(config_path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Settings root must be a mapping", str(config_path))

    known = {f.name for f in dataclasses.fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown settings: {', '.join(unknown)}", str(config_path))

    values: dict[str, Any] = {}
    for key, value in data.items():
        coerced = _coerce(key, value, str(config_path))
        if coerced is not None:
            values[key] = coerced
    return values


def load_settings(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Build settings from defaults, an optional YAML file and the environment."""
    env = os.environ if env is None else env
    values: dict[str, Any] = {}

    if config_path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        if candidate.is_file():
            config_path = candidate
    if config_path is not None:
        values.update(load_config_file(config_path))

    for variable, name in ENV_OVERRIDES.items():
        raw = env.get(variable)
        if raw:
            coerced = _coerce(name, raw, variable)
            if coerced is not None:
                values[name] = coerced

    return Settings(**values)
