#!/usr/bin/env python3
"""
Remove stale conversion sandboxes from the temp area.

Every conversion removes its own sandbox, but a process killed mid-request
(OOM, SIGKILL, host restart) leaves its directory behind. This sweeps
directories matching the sandbox prefix that are older than a cutoff.
"""

from __future__ import annotations

import argparse
import logging
import os
import shutil
import time
from pathlib import Path
from typing import Iterator

from playground_tools.shared.config import load_settings
from playground_tools.shared.errors import ConversionError
from playground_tools.shared.log import setup_logging

logger = logging.getLogger(__name__)


def find_stale_sandboxes(
    temp_dir: Path,
    prefix: str,
    older_than: float,
    *,
    now: float | None = None,
) -> Iterator[Path]:
    """Yield sandbox directories under ``temp_dir`` not modified for ``older_than`` seconds."""
    if not temp_dir.is_dir():
        return
    cutoff = (time.time() if now is None else now) - older_than
    for path in sorted(temp_dir.glob(f"{prefix}-*")):
        if path.is_symlink() or not path.is_dir():
            continue
        try:
            if path.stat().st_mtime <= cutoff:
                yield path
        except OSError:
            continue


def get_dir_size(path: Path) -> int:
    """Total size of regular files under ``path``, not following symlinks."""
    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for name in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
            except OSError:
                pass
    return total


def format_size(size_bytes: float) -> str:
    units = ("B", "KB", "MB", "GB")
    for unit in units:
        if size_bytes < 1024 or unit == units[-1]:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} GB"


def clean_sandbox(path: Path, *, dry_run: bool = False) -> int:
    """Remove one sandbox directory, returning bytes freed."""
    if not path.exists():
        return 0

    size = get_dir_size(path)
    if dry_run:
        print(f"  Would remove: {path} - {format_size(size)}")
        return size

    print(f"  Removing: {path} - {format_size(size)}")
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.warning("Failed to delete sandbox %s: %s", path, e)
        return 0
    return size


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be removed without removing anything",
    )
    parser.add_argument(
        "--older-than",
        type=float,
        default=10.0,
        metavar="MINUTES",
        help="Only remove sandboxes untouched for this many minutes (default: 10)",
    )
    parser.add_argument("--config", type=Path, help="Path to a playground.yaml settings file")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConversionError as e:
        print(f"Error: {e}")
        return 1
    setup_logging(settings.log_level)

    print(f"Sweeping {settings.temp_dir} for stale '{settings.sandbox_prefix}-*' sandboxes...")
    total_freed = 0
    count = 0
    for sandbox in find_stale_sandboxes(
        settings.temp_dir,
        settings.sandbox_prefix,
        args.older_than * 60,
    ):
        total_freed += clean_sandbox(sandbox, dry_run=args.dry_run)
        count += 1

    if not count:
        print("  Nothing to clean.")
    action = "Would free" if args.dry_run else "Freed"
    print(f"\n{action}: {format_size(total_freed)} across {count} sandbox(es)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
