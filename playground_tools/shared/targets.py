"""Target representations and their textual dialects.

Every place that behaves differently for Pydantic and TypeScript output reads
its rules from the :class:`Dialect` attached to a :class:`Target`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .errors import ValidationError


@dataclass(frozen=True, slots=True)
class Dialect:
    """Line-level syntax rules for one target representation."""

    comment_prefix: str
    import_prefixes: tuple[str, ...]
    enum_header: re.Pattern[str]
    enum_value: re.Pattern[str]
    enum_closer: str | None
    grouped_imports: bool

    def is_import(self, line: str) -> bool:
        return line.strip().startswith(self.import_prefixes)

    def comment(self, text: str) -> str:
        """Prefix every line of ``text`` with the comment marker."""
        return "\n".join(
            f"{self.comment_prefix} {line}".rstrip() for line in text.splitlines() or [""]
        )


class Target(str, Enum):
    """Output model dialect selected by the caller."""

    PYDANTIC = "pydantic"
    TYPESCRIPT = "typescript"

    @property
    def dialect(self) -> Dialect:
        return DIALECTS[self]

    @classmethod
    def parse(cls, value: str | Target) -> Target:
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(f'"{t.value}"' for t in cls)
            raise ValidationError(f"must be one of {choices}", field="targetLanguage") from None


DIALECTS: Final[dict[Target, Dialect]] = {
    Target.PYDANTIC: Dialect(
        comment_prefix="#",
        import_prefixes=("from ", "import "),
        enum_header=re.compile(r"^class\s+(\w+Enum)\(str,\s*Enum\):"),
        enum_value=re.compile(r'^(\w+)\s*=\s*"([^"]+)"'),
        enum_closer=None,
        grouped_imports=True,
    ),
    Target.TYPESCRIPT: Dialect(
        comment_prefix="//",
        import_prefixes=("import ",),
        enum_header=re.compile(r"^(?:export\s+)?enum\s+(\w+)\s*\{"),
        enum_value=re.compile(r'^(\w+)\s*=\s*"([^"]+)"\s*,?$'),
        enum_closer="}",
        grouped_imports=False,
    ),
}

SUPPORTED_ZOD_VERSIONS: Final[tuple[str, ...]] = ("3", "4")


def parse_zod_version(value: str | int) -> str:
    """Normalize a Zod major version ("3", 3, "v3") to its string form."""
    text = str(value).strip().lower().removeprefix("v")
    if text not in SUPPORTED_ZOD_VERSIONS:
        choices = " or ".join(f'"{v}"' for v in SUPPORTED_ZOD_VERSIONS)
        raise ValidationError(f"must be either {choices}", field="zodVersion")
    return text
