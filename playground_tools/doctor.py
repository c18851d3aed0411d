#!/usr/bin/env python3
"""
Check that this host can run conversions.

Verifies:
- A working ``node`` executable
- A module root with ``node_modules``
- The schemabridge delegate and the TypeScript compiler
- Each supported Zod major installed as ``node_modules/zod-v<major>``
"""

from __future__ import annotations

import argparse
import json
import subprocess
from dataclasses import dataclass
from pathlib import Path

from playground_tools.converter.sandbox import find_module_root, pinned_zod_path
from playground_tools.shared.config import Settings, load_settings
from playground_tools.shared.errors import ConversionError, UnavailableDependencyError
from playground_tools.shared.targets import SUPPORTED_ZOD_VERSIONS


@dataclass
class Check:
    """Result of one environment check."""
    name: str
    available: bool
    detail: str = ""
    required: bool = True


def check_node(command: str) -> Check:
    """Check that ``node --version`` runs."""
    try:
        result = subprocess.run(
            [command, "--version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
        if result.returncode == 0:
            return Check("Node.js", True, result.stdout.strip().split("\n")[0])
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass
    return Check("Node.js", False, f"'{command}' not runnable")


def package_version(package_dir: Path) -> str | None:
    """Read ``version`` from a package.json, or None if the package is absent."""
    manifest = package_dir / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return None
    return str(data.get("version", "unknown")) if isinstance(data, dict) else None


def check_package(name: str, package_dir: Path, *, required: bool = True) -> Check:
    version = package_version(package_dir)
    if version is None:
        return Check(name, False, f"missing {package_dir.name}", required)
    return Check(name, True, version, required)


def run_checks(settings: Settings) -> list[Check]:
    """Run every check, in dependency order."""
    checks = [check_node(settings.node_command)]

    try:
        module_root = find_module_root(settings)
    except UnavailableDependencyError:
        checks.append(Check("Module root", False, "no node_modules found; set SCHEMABRIDGE_MODULE_ROOT"))
        return checks
    checks.append(Check("Module root", True, str(module_root)))

    node_modules = module_root / "node_modules"
    checks.append(check_package("schemabridge", node_modules / "schemabridge"))
    checks.append(check_package("TypeScript", node_modules / "typescript"))
    for version in SUPPORTED_ZOD_VERSIONS:
        checks.append(check_package(f"Zod v{version}", pinned_zod_path(module_root, version)))
    return checks


def print_checks(checks: list[Check]) -> None:
    for check in checks:
        if check.available:
            print(f"  [OK] {check.name}: {check.detail}")
        else:
            marker = "[FAIL]" if check.required else "[--]"
            print(f"  {marker} {check.name}: {check.detail}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, help="Path to a playground.yaml settings file")
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConversionError as e:
        print(f"Error: {e}")
        return 1

    print("\nChecking conversion dependencies...")
    print("=" * 40)
    checks = run_checks(settings)
    print_checks(checks)

    missing = [c for c in checks if c.required and not c.available]
    if missing:
        print(f"\n{len(missing)} required item(s) missing.")
        return 1
    print("\nAll required dependencies found.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
