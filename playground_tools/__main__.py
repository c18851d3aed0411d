#!/usr/bin/env python3
"""
Zod schema playground tools.

Usage:
    python -m playground_tools <command> [options]

Commands:
    convert     Convert exported Zod schemas to Pydantic or TypeScript
    detect      List the Zod schemas a file exports (and those it does not)
    clean       Remove stale conversion sandboxes
    doctor      Check Node.js, schemabridge and Zod installs

Examples:
    python -m playground_tools convert schemas.ts --target pydantic --zod-version 4
    python -m playground_tools convert schemas.ts -t typescript -o models.ts
    python -m playground_tools detect schemas.ts
    python -m playground_tools clean --dry-run
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def cmd_convert(args: list[str]) -> int:
    """Convert a schema file."""
    from playground_tools.converter.pipeline import main as convert_main
    try:
        return convert_main(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


def cmd_detect(args: list[str]) -> int:
    """List exported and non-exported schemas."""
    from playground_tools.converter.detect import scan_exports

    parser = argparse.ArgumentParser(description="List Zod schemas declared in a file")
    parser.add_argument("source", type=Path, help="File containing Zod schema declarations")
    try:
        parsed = parser.parse_args(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    try:
        source = parsed.source.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot read {parsed.source}: {e.strerror}")
        return 1

    catalog = scan_exports(source)
    print(f"Exported ({len(catalog.exported)}):")
    for name in catalog.exported:
        print(f"  {name}")
    print(f"Not exported ({len(catalog.non_exported)}):")
    for name in catalog.non_exported:
        print(f"  {name}")
    return 0 if catalog.exported else 1


def cmd_clean(args: list[str]) -> int:
    """Remove stale sandboxes."""
    from playground_tools import clean
    try:
        return clean.main(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


def cmd_doctor(args: list[str]) -> int:
    """Check the conversion environment."""
    from playground_tools import doctor
    try:
        return doctor.main(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


COMMANDS = {
    "convert": (cmd_convert, "Convert exported Zod schemas to Pydantic or TypeScript"),
    "detect": (cmd_detect, "List exported and non-exported Zod schemas"),
    "clean": (cmd_clean, "Remove stale conversion sandboxes"),
    "doctor": (cmd_doctor, "Check Node.js, schemabridge and Zod installs"),
}


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command, args = argv[0], argv[1:]
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        print(f"Available commands: {', '.join(COMMANDS.keys())}")
        return 1

    handler, _ = COMMANDS[command]
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
