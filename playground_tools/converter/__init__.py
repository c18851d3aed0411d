"""Zod converter - turns exported Zod schemas into Pydantic or TypeScript models."""

from .delegate import GenerateOptions, NodeDelegate, SchemaDelegate, SchemaHandle
from .detect import ExportCatalog, detect_exports, scan_exports
from .diagnostics import format_conversion_error, scrub_message
from .enums import EnumBlock, EnumRegistry, extract_enums
from .output import assemble, merge_imports, split_output
from .pipeline import (
    ConversionRequest,
    ConversionResult,
    ExportResult,
    convert,
    convert_export,
    main,
)
from .sandbox import SandboxWorkspace, find_module_root, open_sandbox

__all__ = [
    "ConversionRequest",
    "ConversionResult",
    "EnumBlock",
    "EnumRegistry",
    "ExportCatalog",
    "ExportResult",
    "GenerateOptions",
    "NodeDelegate",
    "SandboxWorkspace",
    "SchemaDelegate",
    "SchemaHandle",
    "assemble",
    "convert",
    "convert_export",
    "detect_exports",
    "extract_enums",
    "find_module_root",
    "format_conversion_error",
    "main",
    "merge_imports",
    "open_sandbox",
    "scan_exports",
    "scrub_message",
    "split_output",
]
