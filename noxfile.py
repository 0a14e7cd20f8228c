import nox

PYTHONS = ["3.10", "3.11", "3.12"]
SOURCES = [
    "packages/specifications/src",
    "packages/persistence/sqlalchemy/src",
]
COVERED_PACKAGES = ["aninexus_specifications", "aninexus_persistence_sqlalchemy"]

nox.options.sessions = ["lint", "type_check", "tests", "arch_check"]


@nox.session(python=PYTHONS)
def tests(session: nox.Session) -> None:
    """Both packages' suites plus the architecture rules, with coverage."""
    session.install("-e", ".[test]")
    session.run(
        "pytest",
        *(f"--cov={package}" for package in COVERED_PACKAGES),
        "--cov-report=term-missing",
        *session.posargs,
    )


@nox.session(python=PYTHONS[-1])
def autoformat(session: nox.Session) -> None:
    session.install("ruff")
    session.run("ruff", "check", "--fix", ".")
    session.run("ruff", "format", ".")


@nox.session(python=PYTHONS[-1])
def lint(session: nox.Session) -> None:
    session.install("ruff")
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(python=PYTHONS)
def type_check(session: nox.Session) -> None:
    """mypy --strict over the library sources (tests excluded)."""
    session.install("-e", ".[test]", "mypy")
    session.run("mypy", *SOURCES)


@nox.session(python=PYTHONS[-1])
def arch_check(session: nox.Session) -> None:
    """Import boundaries between the core and the SQLAlchemy adapter."""
    session.install("-e", ".[test]")
    session.run("pytest", "tests/architecture", *session.posargs)


@nox.session(python=PYTHONS[-1])
def dead_code(session: nox.Session) -> None:
    session.install("vulture")
    session.run("vulture", "--exclude", ".nox", *SOURCES, "tests")
