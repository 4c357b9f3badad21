"""Nox quality gates for Prompt Journal.

Updates:
  v0.2.0 - 2026-10-18 - Trim to lint, typecheck, and tests; cover every package.
  v0.1.0 - 2026-10-16 - Run ruff, pyright, and pytest from the project `.venv`.

Run `pip install -e .[dev]` inside `.venv` first; sessions reuse that
environment instead of building their own.
"""

from __future__ import annotations

import sys
from pathlib import Path

import nox

SOURCES: tuple[str, ...] = ("main.py", "noxfile.py", "cli", "config", "core", "models", "tests")
COVERED_PACKAGES: tuple[str, ...] = ("cli", "config", "core", "models")

nox.options.sessions = ["lint", "typecheck", "tests"]


def _tool(session: nox.Session, command: str) -> str:
    """Return *command* from `.venv`, or stop the session when it is not installed."""
    bin_dir = Path(".venv") / ("Scripts" if sys.platform == "win32" else "bin")
    suffix = ".exe" if sys.platform == "win32" else ""
    candidate = bin_dir / f"{command}{suffix}"
    if not candidate.exists():
        session.error(f"{candidate} not found; install the dev extra into .venv")
    return str(candidate)


@nox.session(venv_backend="none")
def lint(session: nox.Session) -> None:
    """Check style and formatting with ruff."""
    ruff = _tool(session, "ruff")
    session.run(ruff, "check", *SOURCES, external=True)
    session.run(ruff, "format", "--check", *SOURCES, external=True)


@nox.session(venv_backend="none")
def typecheck(session: nox.Session) -> None:
    """Run pyright with the strict settings from pyproject.toml."""
    session.run(_tool(session, "pyright"), external=True)


@nox.session(venv_backend="none")
def tests(session: nox.Session) -> None:
    """Run the test suite in parallel with branch coverage."""
    coverage = [f"--cov={package}" for package in COVERED_PACKAGES]
    session.run(
        _tool(session, "pytest"),
        "-n",
        "auto",
        *coverage,
        "--cov-branch",
        "--cov-report=term-missing",
        "--cov-fail-under=80",
        *session.posargs,
        external=True,
    )
