"""Ephemeral per-request workspaces pinned to one Zod version.

A workspace is a uniquely named directory under the configured temp area::

    <temp_dir>/<prefix>-<unix_ms>-<random>/
        node_modules/zod -> <module_root>/node_modules/zod-v<major>
        schema.mjs        transpiled user source
        bridge.mjs        delegate runner

It exists only inside :func:`open_sandbox` and is removed on every exit path.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Iterator

from playground_tools.shared.config import Settings
from playground_tools.shared.errors import ModuleRootNotFoundError, UnavailableDependencyError

logger = logging.getLogger(__name__)

MODULE_FILENAME: Final[str] = "schema.mjs"
PACKAGE_ROOT: Final[Path] = Path(__file__).resolve().parents[1]


@dataclass(frozen=True, slots=True)
class SandboxWorkspace:
    """Handle to a live sandbox directory."""

    root: Path
    module_root: Path
    zod_version: str

    @property
    def module_path(self) -> Path:
        return self.root / MODULE_FILENAME

    @property
    def zod_link(self) -> Path:
        return self.root / "node_modules" / "zod"

    def write_module(self, code: str) -> Path:
        self.module_path.write_text(code, encoding="utf-8")
        return self.module_path


def find_module_root(settings: Settings, start_dirs: list[Path] | None = None) -> Path:
    """Locate the directory whose ``node_modules`` holds the delegate and Zod builds.

    An explicit ``settings.module_root`` wins when it contains ``node_modules``;
    otherwise each start directory is walked upwards.

    Raises:
        ModuleRootNotFoundError: If no ``node_modules`` directory is found.
    """
    override = settings.module_root
    if override is not None and (override / "node_modules").is_dir():
        return override.resolve()

    if start_dirs is None:
        start_dirs = [Path.cwd(), PACKAGE_ROOT]

    for start in start_dirs:
        for directory in (start, *start.parents):
            if (directory / "node_modules").is_dir():
                return directory

    raise ModuleRootNotFoundError()


def pinned_zod_path(module_root: Path, zod_version: str) -> Path:
    return module_root / "node_modules" / f"zod-v{zod_version}"


def sandbox_name(prefix: str) -> str:
    """Return a collision-resistant directory name for one request."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"


def reap_sandbox(root: Path) -> bool:
    """Remove a sandbox tree. Failures are logged, never raised."""
    try:
        shutil.rmtree(root)
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.warning("Failed to delete sandbox %s: %s", root, e)
        return False
    logger.debug("Removed sandbox %s", root)
    return True


def _link_directory(target: Path, link: Path) -> None:
    try:
        link.symlink_to(target, target_is_directory=True)
    except OSError:
        if os.name != "nt":
            raise
        # Windows without symlink privilege: fall back to a copy
        shutil.copytree(target, link)


@contextmanager
def open_sandbox(
    settings: Settings,
    zod_version: str,
    module_root: Path | None = None,
) -> Iterator[SandboxWorkspace]:
    """Create a workspace for one request and remove it when the block exits.

    Raises:
        UnavailableDependencyError: If the requested Zod version is not
            installed. Nothing is created in that case.
    """
    if module_root is None:
        module_root = find_module_root(settings)

    zod_path = pinned_zod_path(module_root, zod_version)
    if not zod_path.is_dir():
        logger.error("Zod v%s not found at %s", zod_version, zod_path)
        raise UnavailableDependencyError("Zod", zod_version)

    temp_dir = settings.temp_dir.resolve()
    temp_dir.mkdir(parents=True, exist_ok=True)
    root = temp_dir / sandbox_name(settings.sandbox_prefix)
    root.mkdir()
    logger.debug("Created sandbox %s", root)

    try:
        workspace = SandboxWorkspace(root=root, module_root=module_root, zod_version=zod_version)
        workspace.zod_link.parent.mkdir()
        _link_directory(zod_path, workspace.zod_link)
        yield workspace
    finally:
        reap_sandbox(root)
