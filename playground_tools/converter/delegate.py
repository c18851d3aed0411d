"""Adapter around the schemabridge delegate library.

The delegate is a Node package, so the default implementation drives it
through a ``node`` subprocess running ``templates/bridge.mjs.j2`` rendered
into the sandbox. Anything implementing :class:`SchemaDelegate` can stand in
for it.
"""

from __future__ import annotations

import json
import logging
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from playground_tools.shared.errors import (
    ConversionTimeoutError,
    DelegateError,
    SchemaGenerateError,
    SchemaLoadError,
    UnavailableDependencyError,
)
from playground_tools.shared.targets import Target

from .sandbox import SandboxWorkspace

logger = logging.getLogger(__name__)

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"
RUNNER_TEMPLATE: Final[str] = "bridge.mjs.j2"
RUNNER_FILENAME: Final[str] = "bridge.mjs"


@dataclass(frozen=True, slots=True)
class GenerateOptions:
    """Per-export options passed to the delegate's generators."""

    target: Target
    name: str
    enum_style: str = "enum"
    enum_base_type: str = "str"

    def to_payload(self) -> dict[str, str]:
        payload = {"target": self.target.value, "name": self.name}
        if self.target is Target.PYDANTIC:
            payload["enumStyle"] = self.enum_style
            payload["enumBaseType"] = self.enum_base_type
        return payload


@dataclass(frozen=True, slots=True)
class SchemaHandle:
    """A schema export the delegate has successfully materialized."""

    export_name: str
    module_path: Path
    warnings: tuple[str, ...] = ()


class SchemaDelegate(Protocol):
    """Operations the conversion core needs from the delegate library."""

    def transpile(self, workspace: SandboxWorkspace, source: str) -> str: ...

    def load_schema(self, workspace: SandboxWorkspace, export_name: str) -> SchemaHandle: ...

    def generate(
        self,
        workspace: SandboxWorkspace,
        schema: SchemaHandle,
        options: GenerateOptions,
    ) -> str: ...


def create_template_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        keep_trailing_newline=True,
        undefined=StrictUndefined,
        auto_reload=False,
    )


@dataclass
class NodeDelegate:
    """Run schemabridge in a ``node`` subprocess inside the sandbox.

    ``deadline`` is a ``time.monotonic()`` value; every subprocess is bounded by
    the time left before it, so a stalled process is killed rather than leaked.
    """

    node_command: str = "node"
    deadline: float | None = None
    budget: float = 0.0
    template_env: Environment = field(default_factory=create_template_env)

    def render_runner(self, workspace: SandboxWorkspace) -> str:
        template = self.template_env.get_template(RUNNER_TEMPLATE)
        return template.render(
            resolver_anchor=str(workspace.module_root / "package.json"),
        )

    def _ensure_runner(self, workspace: SandboxWorkspace) -> Path:
        runner = workspace.root / RUNNER_FILENAME
        if not runner.exists():
            runner.write_text(self.render_runner(workspace), encoding="utf-8")
        return runner

    def _remaining(self) -> float | None:
        if self.deadline is None:
            return None
        remaining = self.deadline - time.monotonic()
        if remaining <= 0:
            raise ConversionTimeoutError(self.budget)
        return remaining

    def _run(
        self,
        workspace: SandboxWorkspace,
        command: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        runner = self._ensure_runner(workspace)
        try:
            result = subprocess.run(
                [self.node_command, str(runner), command],
                input=json.dumps(payload),
                capture_output=True,
                text=True,
                cwd=workspace.root,
                timeout=self._remaining(),
            )
        except FileNotFoundError as e:
            raise UnavailableDependencyError("Node.js") from e
        except subprocess.TimeoutExpired as e:
            raise ConversionTimeoutError(self.budget) from e

        reply = self._parse_reply(result.stdout)
        if reply is None:
            logger.error(
                "Bridge '%s' exited with %s and no reply: %s",
                command,
                result.returncode,
                result.stderr.strip(),
            )
            raise DelegateError(f"Delegate produced no reply for '{command}'", command)
        return reply

    @staticmethod
    def _parse_reply(stdout: str) -> dict[str, Any] | None:
        for line in reversed(stdout.splitlines()):
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                return None
            return data if isinstance(data, dict) else None
        return None

    def transpile(self, workspace: SandboxWorkspace, source: str) -> str:
        reply = self._run(workspace, "transpile", {"source": source})
        if not reply.get("ok"):
            raise DelegateError(f"Transpilation failed: {reply.get('message', '')}", "transpile")
        return str(reply.get("code", ""))

    def load_schema(self, workspace: SandboxWorkspace, export_name: str) -> SchemaHandle:
        reply = self._run(
            workspace,
            "load",
            {"file": str(workspace.module_path), "exportName": export_name},
        )
        if not reply.get("ok"):
            raise SchemaLoadError(export_name, str(reply.get("message", "")))
        warnings = tuple(str(w) for w in reply.get("warnings") or ())
        return SchemaHandle(export_name, workspace.module_path, warnings)

    def generate(
        self,
        workspace: SandboxWorkspace,
        schema: SchemaHandle,
        options: GenerateOptions,
    ) -> str:
        reply = self._run(
            workspace,
            "generate",
            {
                "file": str(schema.module_path),
                "exportName": schema.export_name,
                "options": options.to_payload(),
            },
        )
        if not reply.get("ok"):
            message = str(reply.get("message", ""))
            if reply.get("stage") == "load":
                raise SchemaLoadError(schema.export_name, message)
            raise SchemaGenerateError(schema.export_name, message)
        return str(reply.get("code", ""))
