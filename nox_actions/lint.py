# Import third-party modules
import nox
from nox_actions.utils import PACKAGE_NAME


def lint(session: nox.Session) -> None:
    """Check style and import order."""
    session.install("isort", "ruff")
    session.run("isort", "--check-only", PACKAGE_NAME, "tests")
    session.run("ruff", "check", PACKAGE_NAME, "tests")


def lint_fix(session: nox.Session) -> None:
    """Fix style and import order in place."""
    session.install("isort", "ruff")
    session.run("ruff", "check", "--fix", PACKAGE_NAME, "tests")
    session.run("isort", PACKAGE_NAME, "tests")
