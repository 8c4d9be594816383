# Import third-party modules
import nox
from nox_actions.utils import PACKAGE_NAME
from nox_actions.utils import THIS_ROOT


def pytest(session: nox.Session) -> None:
    """Run the test suite with coverage.

    Extra arguments are passed to pytest, e.g. ``nox -s pytest -- -k agent``.
    """
    session.install("-e", ".[test]")
    session.run(
        "pytest",
        f"--cov={PACKAGE_NAME}",
        "--cov-report=term-missing",
        "--cov-report=xml:coverage.xml",
        *session.posargs,
        env={"PYTHONPATH": THIS_ROOT.as_posix()},
    )
