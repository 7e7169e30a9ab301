"""Ruff over the service, its CLI and tests."""

import subprocess
import sys

TARGETS = ["greenloop/", "cli/", "tests/"]


def _ruff(*args: str) -> int:
    return subprocess.run([sys.executable, "-m", "ruff", *args, *TARGETS], check=False).returncode


def main() -> None:
    """Lint, then verify formatting without rewriting files."""
    sys.exit(_ruff("check") or _ruff("format", "--check"))


def format_code() -> None:
    """Apply ruff fixes and formatting."""
    sys.exit(_ruff("check", "--fix") or _ruff("format"))
