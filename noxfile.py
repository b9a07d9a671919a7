"""Nox sessions for lint, type checking and tests."""

from __future__ import annotations

import nox

nox.options.sessions = ["lint", "typecheck", "tests"]


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff checks and the formatter in check mode."""
    session.install("ruff")
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy over the package with its dependencies installed."""
    session.install("mypy", "types-requests")
    session.install("-e", ".")
    session.run("mypy", "src")


@nox.session
def tests(session: nox.Session) -> None:
    """Run the pytest suite against an editable install."""
    session.install("-e", ".[test]")
    session.run("pytest", *session.posargs)
