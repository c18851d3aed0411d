"""
Zod schema converter - turns exported Zod schemas into Pydantic or TypeScript.

One call to :func:`convert` handles one request end to end:

1. Detect exported Zod bindings (reject before any sandbox work)
2. Build a sandbox pinned to the requested Zod version
3. Transpile the source and convert each export in scan order, isolating
   per-export failures as inline diagnostics
4. Merge imports and enums across exports and assemble the output
5. Remove the sandbox, whatever happened

Expected failures come back as ``ConversionResult(error=...)``; nothing but a
bug in this package raises out of :func:`convert`.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

from playground_tools.shared.config import Settings, load_settings
from playground_tools.shared.errors import (
    ConversionError,
    ConversionTimeoutError,
    DelegateError,
    InternalError,
    PerExportError,
    UnavailableDependencyError,
    ValidationError,
)
from playground_tools.shared.log import setup_logging
from playground_tools.shared.targets import Target, parse_zod_version

from .delegate import GenerateOptions, NodeDelegate, SchemaDelegate
from .detect import ExportCatalog, detect_exports
from .diagnostics import format_conversion_error, scrub_message
from .enums import EnumRegistry, extract_enums
from .output import assemble, merge_imports, split_output
from .sandbox import SandboxWorkspace, find_module_root, open_sandbox

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ConversionRequest:
    """A validated conversion request."""

    source: str
    target: Target
    zod_version: str

    @classmethod
    def create(cls, source: str, target: str | Target, zod_version: str | int) -> ConversionRequest:
        if not isinstance(source, str) or not source.strip():
            raise ValidationError("is required and must be a non-empty string", field="schemaCode")
        return cls(
            source=source,
            target=Target.parse(target),
            zod_version=parse_zod_version(zod_version),
        )


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Outcome for one export: generated code or a diagnostic comment."""

    name: str
    code: str | None = None
    diagnostic: str | None = None

    @property
    def failed(self) -> bool:
        return self.diagnostic is not None


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """What the transport layer receives: either ``output`` or ``error``."""

    output: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str) -> ConversionResult:
        return cls(error=message)

    def to_dict(self) -> dict[str, str]:
        if self.error is not None:
            return {"error": self.error}
        return {"output": self.output or ""}


def convert_export(
    delegate: SchemaDelegate,
    workspace: SandboxWorkspace,
    request: ConversionRequest,
    export_name: str,
) -> ExportResult:
    """Load and convert one export; failures become a diagnostic, not an exception.

    Timeouts and missing dependencies still propagate: they end the batch.
    """
    try:
        schema = delegate.load_schema(workspace, export_name)
        for warning in schema.warnings:
            logger.warning("Warning for %s: %s", export_name, warning)
        code = delegate.generate(
            workspace,
            schema,
            GenerateOptions(target=request.target, name=export_name),
        )
    except (ConversionTimeoutError, UnavailableDependencyError):
        raise
    except (PerExportError, DelegateError) as e:
        logger.warning("Error converting %s: %s", export_name, e)
        error: BaseException = e
    except Exception as e:
        logger.exception("Unexpected error converting %s", export_name)
        error = e
    else:
        return ExportResult(name=export_name, code=code)

    diagnostic = format_conversion_error(
        export_name,
        error,
        request.target,
        request.zod_version,
        sandbox_root=workspace.root,
    )
    return ExportResult(name=export_name, diagnostic=diagnostic)


def run_batch(
    delegate: SchemaDelegate,
    workspace: SandboxWorkspace,
    request: ConversionRequest,
    catalog: ExportCatalog,
) -> str:
    """Convert every export in scan order and assemble the combined output."""
    workspace.write_module(delegate.transpile(workspace, request.source))

    target = request.target
    registry = EnumRegistry()
    import_blocks: list[tuple[str, ...]] = []
    bodies: list[str] = []
    failed = 0

    for export_name in catalog.exported:
        result = convert_export(delegate, workspace, request, export_name)
        if result.failed:
            failed += 1
            bodies.append(result.diagnostic or "")
            continue
        split = split_output(result.code or "", target)
        import_blocks.append(split.imports)
        bodies.append(extract_enums(split.body, target, registry))

    logger.info(
        "Converted %d of %d export(s) to %s (zod v%s, %d shared enum(s))",
        len(catalog.exported) - failed,
        len(catalog.exported),
        target.value,
        request.zod_version,
        len(registry),
    )
    return assemble(
        merge_imports(import_blocks, target),
        registry.values(),
        bodies,
        catalog.non_exported,
        target,
    )


def run_with_timeout(work: Callable[[], T], timeout: float) -> T:
    """Wait at most ``timeout`` seconds for ``work``.

    On expiry the caller stops waiting; the worker thread is abandoned, not
    interrupted.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="convert")
    future = executor.submit(work)
    try:
        return future.result(timeout=timeout)
    except FuturesTimeoutError as e:
        raise ConversionTimeoutError(timeout) from e
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def convert(
    source: str,
    target: str | Target,
    zod_version: str | int,
    *,
    settings: Settings | None = None,
    delegate: SchemaDelegate | None = None,
) -> ConversionResult:
    """Convert the exported Zod schemas in ``source``.

    Args:
        source: TypeScript/JavaScript source declaring Zod schemas.
        target: ``"pydantic"`` or ``"typescript"``.
        zod_version: ``"3"`` or ``"4"``.
        settings: Runtime settings; loaded from file/environment when omitted.
        delegate: Delegate implementation; defaults to :class:`NodeDelegate`.

    Returns:
        A result holding either the generated ``output`` or a safe ``error``.
    """
    try:
        if settings is None:
            settings = load_settings()
        request = ConversionRequest.create(source, target, zod_version)
        catalog = detect_exports(request.source, settings.max_exports)
        logger.debug(
            "Detected exports=%s non_exported=%s",
            list(catalog.exported),
            list(catalog.non_exported),
        )

        module_root = find_module_root(settings)
        budget = settings.conversion_timeout
        if delegate is None:
            delegate = NodeDelegate(
                node_command=settings.node_command,
                deadline=time.monotonic() + budget,
                budget=budget,
            )

        with open_sandbox(settings, request.zod_version, module_root) as workspace:
            output = run_with_timeout(
                lambda: run_batch(delegate, workspace, request, catalog),
                budget,
            )
        return ConversionResult(output=output)

    except ConversionError as e:
        logger.info("Conversion rejected: %s", e)
        return ConversionResult.failure(scrub_message(str(e)))
    except Exception as e:
        logger.exception("Schema conversion error")
        internal = InternalError()
        internal.__cause__ = e
        return ConversionResult.failure(str(internal))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("source", type=Path, help="File containing Zod schema declarations")
    parser.add_argument(
        "--target",
        "-t",
        choices=[t.value for t in Target],
        default=Target.PYDANTIC.value,
        help="Output representation (default: pydantic)",
    )
    parser.add_argument(
        "--zod-version",
        "-z",
        choices=["3", "4"],
        default="4",
        help="Zod major version the schemas are written for (default: 4)",
    )
    parser.add_argument("--output", "-o", type=Path, help="Write output here instead of stdout")
    parser.add_argument("--config", type=Path, help="Path to a playground.yaml settings file")
    parser.add_argument("--timeout", type=float, help="Override the conversion timeout in seconds")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.timeout is not None:
        settings = settings.replace(conversion_timeout=args.timeout)
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        source = args.source.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot read {args.source}: {e.strerror}", file=sys.stderr)
        return 1

    result = convert(source, args.target, args.zod_version, settings=settings)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    output = result.output or ""
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output if output.endswith("\n") else output + "\n", encoding="utf-8")
        print(f"Generated {args.target} models -> {args.output}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
