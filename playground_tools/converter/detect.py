"""Export detection for Zod schema source.

This is a lexical heuristic, not a parser: declarations inside comments or
string literals are matched too, and unusual formatting (a line break between
``=`` and ``z.``) is missed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from playground_tools.shared.errors import CapacityError, NotFoundError

EXPORTED_PATTERN: Final[re.Pattern[str]] = re.compile(r"export\s+const\s+(\w+)\s*=\s*z\.")
ANY_PATTERN: Final[re.Pattern[str]] = re.compile(r"const\s+(\w+)\s*=\s*z\.")


@dataclass(frozen=True, slots=True)
class ExportCatalog:
    """Schema bindings found in one source text, in scan order."""

    exported: tuple[str, ...]
    non_exported: tuple[str, ...]


def scan_exports(source: str) -> ExportCatalog:
    """Find exported and non-exported Zod bindings without enforcing limits."""
    exported = tuple(m.group(1) for m in EXPORTED_PATTERN.finditer(source))
    exported_names = set(exported)

    # dict preserves scan order while collapsing repeats
    non_exported: dict[str, None] = {}
    for match in ANY_PATTERN.finditer(source):
        name = match.group(1)
        if name not in exported_names:
            non_exported.setdefault(name, None)

    return ExportCatalog(exported=exported, non_exported=tuple(non_exported))


def detect_exports(source: str, max_exports: int = 10) -> ExportCatalog:
    """Scan ``source`` and check the catalog can be converted in one request.

    Raises:
        NotFoundError: If nothing is exported.
        CapacityError: If more than ``max_exports`` bindings are exported.
    """
    catalog = scan_exports(source)
    if not catalog.exported:
        raise NotFoundError()
    if len(catalog.exported) > max_exports:
        raise CapacityError(len(catalog.exported), max_exports)
    return catalog
