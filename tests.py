"""
Run the test suite.

Usage (from project root):

    python tests.py               # engine, scorebook and CLI tests
    python tests.py --gui         # also install PySide6 so the GUI tests run
    python tests.py -k scoring    # extra arguments are passed to pytest

GUI tests skip themselves when PySide6 is not installed.
"""
from __future__ import annotations

import importlib.util
import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent


def ensure_test_dependencies(with_gui: bool) -> None:
    needed = ["pytest", "numpy"] + (["PySide6"] if with_gui else [])
    if all(importlib.util.find_spec(name) is not None for name in needed):
        return
    extras = ".[dev,gui]" if with_gui else ".[dev]"
    print(f"Installing test dependencies ({extras}) ...")
    subprocess.check_call(
        [sys.executable, "-m", "pip", "install", "-e", extras],
        cwd=str(ROOT),
    )


def main() -> None:
    args = sys.argv[1:]
    with_gui = "--gui" in args
    args = [a for a in args if a != "--gui"]
    ensure_test_dependencies(with_gui)
    result = subprocess.run([sys.executable, "-m", "pytest", *args], cwd=str(ROOT))
    sys.exit(result.returncode)


if __name__ == "__main__":
    main()
