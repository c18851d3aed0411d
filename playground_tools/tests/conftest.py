import json
import logging
import time

import pytest

from playground_tools.converter.delegate import SchemaHandle
from playground_tools.shared.config import Settings
from playground_tools.shared.errors import SchemaLoadError


class FakeDelegate:
    """In-process stand-in for the Node delegate.

    ``outputs`` maps export names to generated code, or to an exception raised
    while loading. ``generate_errors`` maps names to exceptions raised while
    generating.
    """

    def __init__(self, outputs, *, generate_errors=None, delay=0.0):
        self.outputs = outputs
        self.generate_errors = generate_errors or {}
        self.delay = delay
        self.calls = []
        self.sandboxes = []
        self.transpiled = None

    def transpile(self, workspace, source):
        self.calls.append(("transpile",))
        self.sandboxes.append(workspace.root)
        self.transpiled = source
        return source

    def load_schema(self, workspace, export_name):
        self.calls.append(("load", export_name))
        output = self.outputs.get(export_name)
        if isinstance(output, BaseException):
            raise output
        if output is None:
            raise SchemaLoadError(export_name, f'Export "{export_name}" not found')
        return SchemaHandle(export_name, workspace.module_path)

    def generate(self, workspace, schema, options):
        self.calls.append(("generate", schema.export_name, options.target))
        if self.delay:
            time.sleep(self.delay)
        error = self.generate_errors.get(schema.export_name)
        if error is not None:
            raise error
        return self.outputs[schema.export_name]


@pytest.fixture
def fake_delegate():
    return FakeDelegate


@pytest.fixture
def module_root(tmp_path):
    root = tmp_path / "modules"
    for version in ("3", "4"):
        package = root / "node_modules" / f"zod-v{version}"
        package.mkdir(parents=True)
        (package / "package.json").write_text(
            json.dumps({"name": "zod", "version": f"{version}.0.0"})
        )
    return root


@pytest.fixture
def sandbox_dir(tmp_path):
    path = tmp_path / "sandboxes"
    path.mkdir()
    return path


@pytest.fixture
def settings(module_root, sandbox_dir):
    return Settings(
        module_root=module_root,
        temp_dir=sandbox_dir,
        conversion_timeout=5.0,
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers CLI entry points attach, so they never outlive capsys."""
    logger = logging.getLogger("playground_tools")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
