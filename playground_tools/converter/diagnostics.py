"""Turn raw delegate failures into comment-embedded diagnostics.

Nothing produced here may contain an absolute path, an internal module alias,
or a stack trace. Absolute paths are runs of slash-separated name segments, so
regex literals quoted in Zod messages (``/^[a-z]+$/``) pass through untouched.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

from playground_tools.shared.targets import Target

NOT_A_FUNCTION: Final[re.Pattern[str]] = re.compile(r"z\.(\w+) is not a function")
IMPORT_FAILURE: Final[re.Pattern[str]] = re.compile(
    r'Failed to import schema module "([^"]+)": (.+)', re.DOTALL
)
STACK_FRAME: Final[re.Pattern[str]] = re.compile(r"^\s+at\s", re.MULTILINE)
SANDBOX_MODULE: Final[re.Pattern[str]] = re.compile(
    r"(?:file://)?(?:[A-Za-z]:)?[\\/][^\s'\"()]*[\\/]schema\.(?:ts|mjs)"
)
ABSOLUTE_PATH: Final[re.Pattern[str]] = re.compile(
    r"file:///?[^\s'\"()]+"
    r"|(?<![\w./:])/(?:[\w.@+-]+/)+[\w.@+-]+"
    r"|\b[A-Za-z]:\\(?:[^\s\\'\"():]+\\)*[^\s\\'\"():]*"
)
INTERNAL_ALIAS: Final[re.Pattern[str]] = re.compile(r"\bimport_zod\d*\.")


def scrub_message(message: str, sandbox_root: Path | None = None) -> str:
    """Strip stack frames, absolute paths and bundler aliases from a message."""
    frame = STACK_FRAME.search(message)
    if frame:
        message = message[: frame.start()]

    if sandbox_root is not None:
        roots = [str(sandbox_root)]
        if sandbox_root.is_absolute():
            roots.insert(0, sandbox_root.as_uri())
        for root in roots:
            message = message.replace(f"{root}/schema.mjs", "schema file")
            message = message.replace(f"{root}/schema.ts", "schema file")
            message = message.replace(root, "sandbox")

    message = SANDBOX_MODULE.sub("schema file", message)
    message = ABSOLUTE_PATH.sub("<path>", message)
    message = INTERNAL_ALIAS.sub("", message)
    return message.strip() or "Unknown error"


def describe_failure(
    export_name: str,
    message: str,
    zod_version: str,
    sandbox_root: Path | None = None,
) -> str:
    """Classify a failure message and return plain-text guidance for it."""
    not_function = NOT_A_FUNCTION.search(message)
    if not_function:
        method = not_function.group(1)
        return (
            f"Invalid Zod method 'z.{method}()' in schema '{export_name}'. "
            f"This method may not exist in the selected Zod version (v{zod_version}). "
            "Check the Zod documentation for valid methods."
        )

    import_failure = IMPORT_FAILURE.search(message)
    if import_failure:
        cause = scrub_message(import_failure.group(2), sandbox_root)
        return f"Failed to load schema '{export_name}': {cause}"

    return f"Error in schema '{export_name}': {scrub_message(message, sandbox_root)}"


def format_conversion_error(
    export_name: str,
    error: BaseException | str,
    target: Target,
    zod_version: str,
    sandbox_root: Path | None = None,
) -> str:
    """Render a failure as a comment block in the target's comment syntax."""
    message = error if isinstance(error, str) else (str(error) or type(error).__name__)
    text = describe_failure(export_name, message, zod_version, sandbox_root)
    return target.dialect.comment(text)
