"""Splitting, merging and assembling generated code."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Iterable, Sequence

from playground_tools.shared.targets import Target

FROM_IMPORT: Final[re.Pattern[str]] = re.compile(r"^from\s+(\S+)\s+import\s+(.+)$")
PLAIN_IMPORT: Final[re.Pattern[str]] = re.compile(r"^import\s+(.+)$")


@dataclass(frozen=True, slots=True)
class SplitOutput:
    """Generated code for one export, with its leading imports separated."""

    imports: tuple[str, ...]
    body: str


def split_output(code: str, target: Target) -> SplitOutput:
    """Separate the leading import block from the rest of ``code``.

    The first line that is not an import closes the block for good; import-like
    lines after it stay in the body.
    """
    dialect = target.dialect
    imports: list[str] = []
    body_lines: list[str] = []
    in_imports = True

    for line in code.split("\n"):
        if in_imports and dialect.is_import(line):
            imports.append(line)
        else:
            in_imports = False
            body_lines.append(line)

    return SplitOutput(imports=tuple(imports), body="\n".join(body_lines).strip())


def _merge_grouped(import_blocks: Iterable[Sequence[str]]) -> list[str]:
    by_module: dict[str, set[str]] = {}
    standalone: set[str] = set()

    for block in import_blocks:
        for line in block:
            stripped = line.strip()
            from_match = FROM_IMPORT.match(stripped)
            if from_match:
                module, items = from_match.groups()
                names = by_module.setdefault(module, set())
                names.update(item.strip() for item in items.split(",") if item.strip())
                continue
            if PLAIN_IMPORT.match(stripped):
                standalone.add(stripped)

    merged = [
        f"from {module} import {', '.join(sorted(by_module[module]))}"
        for module in sorted(by_module)
        if by_module[module]
    ]
    merged.extend(sorted(standalone))
    return merged


def _merge_verbatim(import_blocks: Iterable[Sequence[str]]) -> list[str]:
    seen: set[str] = set()
    merged: list[str] = []
    for block in import_blocks:
        for line in block:
            key = line.strip()
            if key not in seen:
                seen.add(key)
                merged.append(line)
    return merged


def merge_imports(import_blocks: Iterable[Sequence[str]], target: Target) -> list[str]:
    """Merge the import blocks of every export into one deduplicated list.

    Pydantic imports are grouped per module with items unioned and sorted;
    TypeScript imports are deduplicated by exact text in first-seen order.
    """
    if target.dialect.grouped_imports:
        return _merge_grouped(import_blocks)
    return _merge_verbatim(import_blocks)


def unhandled_notice(names: Sequence[str], target: Target) -> str:
    """Comment block listing schemas that were found but not exported."""
    if not names:
        return ""
    comment = target.dialect.comment
    return "\n".join([
        comment(
            "Note: The following Zod schemas were detected but not converted "
            "because they are not exported:"
        ),
        comment(", ".join(names)),
        comment(
            "To convert them, add 'export' before their declaration "
            f"(e.g., export const {names[0]} = z....)"
        ),
    ])


def assemble(
    imports: Sequence[str],
    enums: Sequence[str],
    bodies: Sequence[str],
    non_exported: Sequence[str],
    target: Target,
) -> str:
    """Concatenate the final output in its fixed section order."""
    imports_section = "\n".join(imports) + "\n" if imports else ""
    enum_section = "\n\n".join(enums) + "\n\n" if enums else ""
    body_section = "\n\n".join(bodies)

    notice = unhandled_notice(non_exported, target)
    notice_section = f"\n\n{notice}" if notice else ""

    spacer = "\n" if imports_section and (enum_section or body_section) else ""
    return imports_section + spacer + enum_section + body_section + notice_section
