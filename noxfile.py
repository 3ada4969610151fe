import nox

# Standard locations for the code
LOCATIONS = [
    "src",
    "tests",
]


@nox.session(python=["3.10", "3.11", "3.12"])
def tests(session: nox.Session) -> None:
    """Run the unit test suite (integration tests skip without testcontainers)."""
    session.install("-e", ".[dev]")
    session.run("pytest", *session.posargs)


@nox.session(python=["3.12"])
def integration(session: nox.Session) -> None:
    """Run the PostgreSQL integration tests in a container."""
    session.install("-e", ".[dev,integration]")
    session.run("pytest", "tests/integration", *session.posargs)


@nox.session(python=["3.10", "3.11", "3.12"])
def autoformat(session: nox.Session) -> None:
    """Fix linting issues and format code."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", *LOCATIONS)
    session.run("ruff", "format", *LOCATIONS)


@nox.session(python=["3.10", "3.11", "3.12"])
def lint(session: nox.Session) -> None:
    """Run ruff linter and formatter checks."""
    session.install("ruff")
    session.run("ruff", "check", *LOCATIONS)
    session.run("ruff", "format", "--check", *LOCATIONS)


@nox.session(python=["3.10", "3.11", "3.12"])
def type_check(session: nox.Session) -> None:
    """Run mypy static type analysis."""
    session.install("-e", ".[dev]")
    session.run("mypy", "src")


@nox.session(python=["3.10", "3.11", "3.12"])
def arch_check(session: nox.Session) -> None:
    """Verify architectural boundaries using pytest-archon."""
    session.install("-e", ".[dev]")
    session.run("pytest", "tests/architecture", *session.posargs)
