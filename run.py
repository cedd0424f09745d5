"""
Convenience launcher for a terminal match against the computer.

Behaviour:
- If not already running inside a virtual environment, create ``.venv`` in the
  project root (if it does not exist), then re-run this script inside it.
- Inside the venv:
  - If truco is importable: start a match directly (no pip install).
  - Otherwise: install the package with pip install -e ., then start a match.

Extra arguments are passed to ``truco play`` (e.g. ``python run.py --fast``).
"""
from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent
VENV_DIR = ROOT / ".venv"


def in_virtualenv() -> bool:
    """Return True if we're currently running inside any virtualenv."""
    return sys.prefix != getattr(sys, "base_prefix", sys.prefix) or bool(
        os.environ.get("VIRTUAL_ENV")
    )


def venv_python_path() -> Path:
    """Return the path to the python executable inside .venv."""
    if os.name == "nt":
        return VENV_DIR / "Scripts" / "python.exe"
    return VENV_DIR / "bin" / "python"


def package_installed() -> bool:
    """Return True if the truco package is importable."""
    try:
        import truco  # noqa: F401
        return True
    except ImportError:
        return False


def _play_args() -> list[str]:
    return [a for a in sys.argv[1:] if a != "--inside-venv"]


def ensure_venv_and_rerun() -> None:
    """Create .venv if needed and re-run this script inside it."""
    if not VENV_DIR.exists():
        print(f"Creating virtual environment at {VENV_DIR} ...")
        subprocess.check_call(
            [sys.executable, "-m", "venv", str(VENV_DIR)],
            cwd=str(ROOT),
        )

    py = venv_python_path()
    print(f"Re-running inside virtualenv using {py} ...")
    cmd = [str(py), str(ROOT / "run.py"), "--inside-venv", *_play_args()]
    subprocess.check_call(cmd, cwd=str(ROOT))


def inside_venv_main() -> None:
    """Install the package if needed, then start a match."""
    if not package_installed():
        print("Installing truco-lite into virtualenv ...")
        subprocess.check_call(
            [sys.executable, "-m", "pip", "install", "-e", "."],
            cwd=str(ROOT),
        )

    subprocess.check_call(
        [sys.executable, "-m", "truco.cli", "play", *_play_args()],
        cwd=str(ROOT),
    )


def main() -> None:
    if "--inside-venv" in sys.argv:
        inside_venv_main()
        return

    if in_virtualenv():
        inside_venv_main()
    else:
        ensure_venv_and_rerun()


if __name__ == "__main__":
    main()
