#!/usr/bin/env python3
"""
Convenience wrapper for the Zod schema playground tools.

Forwards to the playground_tools module. Run with --help to see available
commands.

Usage:
    python playground.py <command> [options]
    ./playground.py <command> [options]  (on Unix with execute permission)

Examples:
    python playground.py convert schemas.ts --target pydantic --zod-version 3
    python playground.py doctor
"""

import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent


def main() -> int:
    """Forward all arguments to the playground_tools module."""
    # Keep the caller's cwd so relative schema paths resolve as typed
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH")]))
    return subprocess.call(
        [sys.executable, "-m", "playground_tools"] + sys.argv[1:],
        env=env,
    )


if __name__ == "__main__":
    sys.exit(main())
