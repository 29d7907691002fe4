from __future__ import annotations

import nox

nox.options.sessions = ["tests", "mypy"]


@nox.session(python="3.12")
def tests(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.run("pytest", "-q", *session.posargs)


@nox.session(python="3.12")
def property_tests(session: nox.Session) -> None:
    session.install("-e", ".[test]")
    session.run("pytest", "-q", "-m", "property", "--hypothesis-show-statistics", *session.posargs)


@nox.session(python="3.12")
def mypy(session: nox.Session) -> None:
    session.install("-e", ".[dev]")
    session.run("mypy", "src", *session.posargs)


# Oldest supported interpreter; exercises the tomli and StrEnum fallbacks
@nox.session(name="tests-3.10", python="3.10")
def tests_310(session: nox.Session) -> None:
    tests(session)
