"""Lift enum blocks out of generated bodies and share them across a batch.

Two enums with the same ordered literal values are the same enum, whatever
they are called. The first one seen is kept; later copies are dropped and the
body that held them is pointed at the kept name. An enum whose name is already
taken by different values gets a numbered name (``StatusEnum2``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from playground_tools.shared.targets import Dialect, Target


@dataclass(frozen=True, slots=True)
class EnumBlock:
    """One enum definition found in a body."""

    name: str
    signature: str
    text: str
    start: int
    end: int


@dataclass
class EnumRegistry:
    """Canonical enum definitions keyed by value signature, in insertion order."""

    definitions: dict[str, str] = field(default_factory=dict)
    names: dict[str, str] = field(default_factory=dict)

    def unique_name(self, name: str) -> str:
        taken = set(self.names.values())
        if name not in taken:
            return name
        suffix = 2
        while f"{name}{suffix}" in taken:
            suffix += 1
        return f"{name}{suffix}"

    def register(self, block: EnumBlock) -> str:
        """Record ``block`` unless its signature is known; return the canonical name."""
        if block.signature not in self.definitions:
            name = self.unique_name(block.name)
            text = block.text
            if name != block.name:
                header, newline, rest = text.partition("\n")
                header = re.sub(rf"\b{re.escape(block.name)}\b", name, header, count=1)
                text = header + newline + rest
            self.definitions[block.signature] = text
            self.names[block.signature] = name
        return self.names[block.signature]

    def values(self) -> list[str]:
        return list(self.definitions.values())

    def __len__(self) -> int:
        return len(self.definitions)


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def _continues(line: str, header_indent: int, dialect: Dialect) -> bool:
    stripped = line.strip()
    if not stripped:
        return True
    return _indent(line) >= header_indent and bool(dialect.enum_value.match(stripped))


def find_enum_blocks(lines: list[str], target: Target) -> list[EnumBlock]:
    """Locate enum blocks in ``lines``; ``end`` is exclusive."""
    dialect = target.dialect
    blocks: list[EnumBlock] = []
    i = 0

    while i < len(lines):
        header = dialect.enum_header.match(lines[i].strip())
        if not header:
            i += 1
            continue

        header_indent = _indent(lines[i])
        end = i + 1
        values: list[str] = []
        while end < len(lines) and _continues(lines[end], header_indent, dialect):
            value = dialect.enum_value.match(lines[end].strip())
            if value:
                values.append(value.group(2))
            end += 1

        if dialect.enum_closer is not None:
            if end < len(lines) and lines[end].strip() == dialect.enum_closer:
                end += 1
            else:
                # Unterminated block: not an enum we understand
                i += 1
                continue

        # Trailing blank lines belong to the surrounding body
        text_end = end
        while text_end > i + 1 and not lines[text_end - 1].strip():
            text_end -= 1

        if values:
            blocks.append(EnumBlock(
                name=header.group(1),
                signature=",".join(values),
                text="\n".join(lines[i:text_end]),
                start=i,
                end=text_end,
            ))
        i = max(end, i + 1)

    return blocks


def extract_enums(body: str, target: Target, registry: EnumRegistry) -> str:
    """Move enum blocks from ``body`` into ``registry`` and return the rest.

    References to a dropped duplicate or a renumbered enum are rewritten to
    the name the registry holds.
    """
    lines = body.split("\n")
    blocks = find_enum_blocks(lines, target)
    if not blocks:
        return body.strip()

    renames: dict[str, str] = {}
    kept: list[str] = []
    cursor = 0
    for block in blocks:
        kept.extend(lines[cursor:block.start])
        cursor = block.end
        canonical = registry.register(block)
        if canonical != block.name:
            renames[block.name] = canonical
    kept.extend(lines[cursor:])

    remaining = "\n".join(kept).strip()
    if renames:
        # One pass, so a rename never feeds into another
        alternatives = "|".join(re.escape(old) for old in sorted(renames, key=len, reverse=True))
        remaining = re.sub(rf"\b(?:{alternatives})\b", lambda m: renames[m.group(0)], remaining)
    # Collapse the gaps left behind by removed blocks
    remaining = re.sub(r"\n{4,}", "\n\n\n", remaining)
    return remaining
