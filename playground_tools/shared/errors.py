"""Custom exceptions for the conversion core."""

from __future__ import annotations


class ConversionError(Exception):
    """Base exception for expected conversion failures.

    ``str(error)`` is always safe to show to the caller.
    """


class ConfigError(ConversionError):
    """Raised when the settings file or environment is invalid."""

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        full_message = message if not config_path else f"[{config_path}] {message}"
        super().__init__(full_message)


class ValidationError(ConversionError):
    """Raised when a conversion request is malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class NotFoundError(ConversionError):
    """Raised when the source declares no exported schemas."""

    def __init__(self) -> None:
        super().__init__(
            "No Zod schema exports found. Make sure to export your schemas with: "
            "export const schemaName = z.object(...)"
        )


class CapacityError(ConversionError):
    """Raised when the source exports more schemas than one request may convert."""

    def __init__(self, found: int, limit: int) -> None:
        self.found = found
        self.limit = limit
        super().__init__(
            f"Too many schema exports. Maximum {limit} schemas allowed, found {found}."
        )


class UnavailableDependencyError(ConversionError):
    """Raised when a required runtime dependency is not installed."""

    def __init__(
        self,
        dependency: str,
        version: str | None = None,
        message: str | None = None,
    ) -> None:
        self.dependency = dependency
        self.version = version
        label = f"{dependency} v{version}" if version else dependency
        super().__init__(message or f"{label} is not installed on this server.")


class ModuleRootNotFoundError(UnavailableDependencyError):
    """Raised when no directory with ``node_modules`` can be located."""

    def __init__(self) -> None:
        super().__init__(
            "node_modules",
            message="No Node module root found on this server. "
            "Set SCHEMABRIDGE_MODULE_ROOT to a directory containing node_modules.",
        )


class PerExportError(ConversionError):
    """Raised when a single schema export fails to load or convert."""

    stage = "convert"

    def __init__(self, export_name: str, message: str) -> None:
        self.export_name = export_name
        self.detail = message
        super().__init__(message)


class SchemaLoadError(PerExportError):
    """Raised when the delegate cannot materialize an export."""

    stage = "load"


class SchemaGenerateError(PerExportError):
    """Raised when the delegate fails to generate code for a loaded export."""

    stage = "generate"


class DelegateError(ConversionError):
    """Raised when the delegate process itself misbehaves."""

    def __init__(self, message: str, command: str | None = None) -> None:
        self.command = command
        super().__init__(message)


class ConversionTimeoutError(ConversionError):
    """Raised when the batch exceeds the internal execution budget."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        super().__init__(
            f"Conversion timed out after {seconds:g}s. "
            "Try converting fewer or simpler schemas at once."
        )


class InternalError(ConversionError):
    """Wraps an unanticipated fault; the original is kept as ``__cause__``."""

    def __init__(self) -> None:
        super().__init__("Conversion failed due to an internal error.")
