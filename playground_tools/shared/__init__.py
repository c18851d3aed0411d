"""Shared utilities for the conversion tools."""

from .config import (
    Settings,
    load_config_file,
    load_settings,
)
from .errors import (
    CapacityError,
    ConfigError,
    ConversionError,
    ConversionTimeoutError,
    DelegateError,
    InternalError,
    ModuleRootNotFoundError,
    NotFoundError,
    PerExportError,
    SchemaGenerateError,
    SchemaLoadError,
    UnavailableDependencyError,
    ValidationError,
)
from .log import setup_logging
from .targets import (
    DIALECTS,
    SUPPORTED_ZOD_VERSIONS,
    Dialect,
    Target,
    parse_zod_version,
)

__all__ = [
    # Settings
    "Settings",
    "load_config_file",
    "load_settings",
    "setup_logging",
    # Targets
    "DIALECTS",
    "SUPPORTED_ZOD_VERSIONS",
    "Dialect",
    "Target",
    "parse_zod_version",
    # Errors
    "CapacityError",
    "ConfigError",
    "ConversionError",
    "ConversionTimeoutError",
    "DelegateError",
    "InternalError",
    "ModuleRootNotFoundError",
    "NotFoundError",
    "PerExportError",
    "SchemaGenerateError",
    "SchemaLoadError",
    "UnavailableDependencyError",
    "ValidationError",
]
