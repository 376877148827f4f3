"""
Launcher for the Coinche scorer.

    python run.py                 # open the scoresheet GUI
    python run.py stats ABC       # any other arguments go to the coinche CLI

Behaviour:
- Outside a virtual environment, create ``.venv`` in the project root (once)
  and re-run this script with its interpreter.
- Inside it, install the package with the extras the chosen entry point needs
  (``.[gui]`` for the GUI, nothing extra for the CLI) when it is missing, then
  start the GUI or hand the arguments to ``coinche.cli``.
"""
from __future__ import annotations

import importlib.util
import os
import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent
VENV_DIR = ROOT / ".venv"
INSIDE_FLAG = "--inside-venv"


def in_virtualenv() -> bool:
    return sys.prefix != getattr(sys, "base_prefix", sys.prefix) or bool(
        os.environ.get("VIRTUAL_ENV")
    )


def venv_python_path() -> Path:
    if os.name == "nt":
        return VENV_DIR / "Scripts" / "python.exe"
    return VENV_DIR / "bin" / "python"


def missing_modules(names: list[str]) -> list[str]:
    return [name for name in names if importlib.util.find_spec(name) is None]


def install(extras: str) -> None:
    target = f".[{extras}]" if extras else "."
    print(f"Installing coinche-scorer ({target}) into {sys.prefix} ...")
    subprocess.check_call([sys.executable, "-m", "pip", "install", "-e", target], cwd=str(ROOT))


def run(args: list[str]) -> None:
    if args:
        if missing_modules(["coinche", "numpy"]):
            install("")
        subprocess.check_call([sys.executable, "-m", "coinche.cli", *args], cwd=str(ROOT))
        return
    if missing_modules(["coinche_gui", "numpy", "PySide6"]):
        install("gui")
    subprocess.check_call([sys.executable, "-m", "coinche_gui.main"], cwd=str(ROOT))


def main() -> None:
    args = [a for a in sys.argv[1:] if a != INSIDE_FLAG]
    if INSIDE_FLAG in sys.argv or in_virtualenv():
        run(args)
        return

    if not VENV_DIR.exists():
        print(f"Creating virtual environment at {VENV_DIR} ...")
        subprocess.check_call([sys.executable, "-m", "venv", str(VENV_DIR)], cwd=str(ROOT))
    py = venv_python_path()
    subprocess.check_call([str(py), str(ROOT / "run.py"), INSIDE_FLAG, *args], cwd=str(ROOT))


if __name__ == "__main__":
    main()
