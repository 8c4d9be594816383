"""SSH authentication test against GitHub."""

# Import built-in modules
from dataclasses import dataclass
import enum
import logging
import os
import re
from typing import Optional

# Import third-party modules
from github_ssh_wizard.config import WizardConfig
from github_ssh_wizard.constants import GitConstants
from github_ssh_wizard.constants import SSHAgentConstants
from github_ssh_wizard.session import SessionCache
from github_ssh_wizard.utils import run_command


logger = logging.getLogger(__name__)


class AuthStatus(enum.Enum):
    """Outcome of an ``ssh -T`` handshake."""

    AUTHENTICATED = "authenticated"
    DENIED = "denied"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ConnectionResult:
    """Classified response of a connectivity test."""

    status: AuthStatus
    output: str
    username: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is AuthStatus.AUTHENTICATED


def classify_response(text: str) -> AuthStatus:
    """Classify the text GitHub prints for ``ssh -T``.

    ``ssh -T git@github.com`` always exits non-zero because GitHub refuses
    shell access, so only the greeting tells success from failure.
    """
    text = text or ""
    for pattern in GitConstants.AUTH_SUCCESS_PATTERNS:
        if re.search(pattern, text):
            return AuthStatus.AUTHENTICATED
    if re.search(GitConstants.AUTH_DENIED_PATTERN, text):
        return AuthStatus.DENIED
    return AuthStatus.UNKNOWN


def _greeted_user(text: str) -> Optional[str]:
    match = re.search(GitConstants.AUTH_SUCCESS_PATTERNS[0], text or "")
    return match.group("user") if match else None


class ConnectivityTester:
    """Runs the authentication-only handshake and classifies the reply."""

    def __init__(self, config: WizardConfig, agent, session: Optional[SessionCache] = None):
        self._config = config
        self._agent = agent
        self._session = session or SessionCache(config.session_file)

    def test(self, host: Optional[str] = None, verbose: bool = False) -> ConnectionResult:
        """Test SSH authentication against a host.

        Args:
            host: Host or alias to connect to, defaults to the target host
            verbose: Pass ``-v`` to ssh

        Returns:
            ConnectionResult: Classified response; never raises on a denied
            handshake
        """
        host = host or self._config.target_host
        self._agent.ensure_agent_running()

        session_key = self._session.read()
        if session_key and os.path.isfile(session_key):
            self._agent.ensure_key_loaded(session_key)

        flags = "-vT" if verbose else "-T"
        cmd = ["ssh", flags, *SSHAgentConstants.SSH_TEST_OPTIONS, f"{self._config.login_user}@{host}"]
        result = run_command(cmd, check_output=False, env=self._config.env)
        output = ""
        if result is not None:
            output = "\n".join(part.strip() for part in (result.stdout, result.stderr) if part and part.strip())

        status = classify_response(output)
        logger.debug("SSH test against %s: %s", host, status.value)
        return ConnectionResult(status=status, output=output, username=_greeted_user(output))
