"""Nox sessions for the reservation engine."""

import nox

nox.options.sessions = ["tests", "type_check"]
nox.options.default_venv_backend = "uv"

PYTHON_VERSIONS = ["3.10", "3.11", "3.12", "3.13"]


@nox.session(python=PYTHON_VERSIONS)
def tests(session):
    """Run unit and integration tests without coverage."""
    session.install(".[test]")
    session.run("pytest", "tests/", "-q", "--no-cov", *session.posargs)


@nox.session(python="3.12")
def coverage(session):
    """Run the suite once with the coverage report from pyproject."""
    session.install(".[test]")
    session.run("pytest", "tests/", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def type_check(session):
    """Run mypy over the package."""
    session.install(".[full]", "mypy")
    session.run("mypy", "src/library_reservations", *session.posargs)
