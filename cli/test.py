"""Test suites, selected by the markers conftest applies per directory."""

import subprocess
import sys


def _pytest(*args: str) -> int:
    return subprocess.run(
        [sys.executable, "-m", "pytest", "tests", "--tb=short", *args],
        check=False,
    ).returncode


def main() -> None:
    """Ledger, storage, feed and surfacing unit tests."""
    sys.exit(_pytest("-m", "unit", *sys.argv[1:]))


def test_smoke() -> None:
    """API smoke tests through the FastAPI test client."""
    sys.exit(_pytest("-m", "smoke", *sys.argv[1:]))


def test_all() -> None:
    sys.exit(_pytest("-v", *sys.argv[1:]))
