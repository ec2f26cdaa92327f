#!/usr/bin/env -S uv run --script
# /// script
# dependencies = ["nox"]
# ///
"""Nox sessions for autotycoon development tasks.

Run `nox -l` to list the sessions; `nox -s tests_quick` is the fast loop.
"""

from __future__ import annotations

import nox

nox.needs_version = ">=2024.3.2"
nox.options.default_venv_backend = "uv|virtualenv"
nox.options.sessions = ["lint", "tests_quick"]

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]
DEFAULT_PYTHON = "3.12"


@nox.session(python=DEFAULT_PYTHON)
def lint(session: nox.Session) -> None:
    """Ruff formatting and lint checks, then mypy over src/autotycoon."""
    session.install("-e", ".[lint]")
    session.run("ruff", "format", "--check", ".")
    session.run("ruff", "check", ".")
    session.run("mypy")


@nox.session(python=DEFAULT_PYTHON)
def format(session: nox.Session) -> None:
    session.install("-e", ".[lint]")
    session.run("ruff", "format", ".")
    session.run("ruff", "check", "--fix", ".")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Full suite, including multi-year runs and hypothesis invariants."""
    session.install("-e", ".[test]")
    session.run("pytest", *session.posargs)


@nox.session(python=DEFAULT_PYTHON)
def tests_quick(session: nox.Session) -> None:
    """Unit and integration tests without slow runs or invariants."""
    session.install("-e", ".[test]")
    session.run("pytest", "-m", "not slow and not invariants", *session.posargs)


@nox.session(python=DEFAULT_PYTHON)
def invariants(session: nox.Session) -> None:
    """Only the hypothesis invariant tests."""
    session.install("-e", ".[test]")
    session.run("pytest", "-m", "invariants", *session.posargs)


@nox.session(python=DEFAULT_PYTHON)
def coverage(session: nox.Session) -> None:
    """Coverage with every debug logging branch switched on."""
    session.install("-e", ".[test]")
    session.run(
        "pytest",
        "--cov=src/autotycoon",
        "--cov-report=term-missing",
        "--cov-report=html",
        *session.posargs,
        env={"COVERAGE_RUN": "true"},
    )


@nox.session(python=DEFAULT_PYTHON)
def typecheck(session: nox.Session) -> None:
    session.install("-e", ".[lint]")
    session.run("mypy", *session.posargs)


@nox.session(python=DEFAULT_PYTHON)
def simulate(session: nox.Session) -> None:
    """Play a headless game: `nox -s simulate -- --years 5 --seed 1`."""
    session.install("-e", ".")
    session.run("autotycoon", *(session.posargs or ["--years", "2"]))


if __name__ == "__main__":
    nox.main()
