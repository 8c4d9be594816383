"""ssh-agent lifecycle and key loading."""

# Import built-in modules
import json
import logging
import os
import time
from typing import Dict
from typing import Optional

# Import third-party modules
from github_ssh_wizard.config import WizardConfig
from github_ssh_wizard.constants import SSHAgentConstants
from github_ssh_wizard.constants import SystemConstants
from github_ssh_wizard.exceptions import AgentStartFailed
from github_ssh_wizard.exceptions import KeyLoadFailed
from github_ssh_wizard.exceptions import KeyNotFound
from github_ssh_wizard.session import SessionCache
from github_ssh_wizard.ssh_key_manager import public_key_fingerprint
from github_ssh_wizard.utils import run_command


logger = logging.getLogger(__name__)


def parse_agent_output(output: str) -> Dict[str, str]:
    """Parse the Bourne shell snippet printed by ``ssh-agent -s``.

    Args:
        output: stdout of ``ssh-agent -s``

    Returns:
        dict: Variable assignments, e.g. SSH_AUTH_SOCK and SSH_AGENT_PID
    """
    env_vars = {}
    for line in output.split("\n"):
        if "=" in line and ";" in line:
            var = line.split("=", 1)[0].strip()
            val = line.split("=", 1)[1].split(";")[0].strip()
            if val.startswith('"') and val.endswith('"'):
                val = val[1:-1]
            env_vars[var] = val
    return env_vars


class SSHAgentManager:
    """Keeps an ssh-agent available and loads keys into it.

    Agent session variables live in ``config.env`` so that every later
    subprocess talks to the same agent.
    """

    def __init__(self, config: WizardConfig, session: Optional[SessionCache] = None):
        """Initialize the agent manager.

        Args:
            config: Shared wizard configuration
            session: Session cache updated after each successful key load
        """
        self._config = config
        self._session = session or SessionCache(config.session_file)

    @property
    def env(self) -> Dict[str, str]:
        return self._config.env

    def _ssh_add_list(self):
        return run_command(["ssh-add", "-l"], check_output=False, env=self.env)

    def is_agent_reachable(self) -> bool:
        """Check whether the agent named by the session variables answers."""
        if not self.env.get(SSHAgentConstants.SSH_AUTH_SOCK_VAR):
            return False
        result = self._ssh_add_list()
        return result is not None and result.returncode != SSHAgentConstants.AGENT_UNREACHABLE_EXIT_CODE

    def _save_agent_info(self, auth_sock: str, agent_pid: str) -> None:
        """Save SSH agent information to file.

        Note:
            This method will not raise exceptions, only log errors
        """
        try:
            agent_info = {
                SSHAgentConstants.SSH_AUTH_SOCK_VAR: auth_sock,
                SSHAgentConstants.SSH_AGENT_PID_VAR: agent_pid,
                "timestamp": time.time(),
                "platform": os.name
            }
            agent_info_file = self._config.agent_info_file
            os.makedirs(os.path.dirname(agent_info_file), exist_ok=True)
            with open(agent_info_file, "w", encoding=SystemConstants.DEFAULT_ENCODING) as f:
                json.dump(agent_info, f)
            logger.debug("Saved agent info to %s", agent_info_file)
        except (OSError, TypeError) as e:
            logger.error("Failed to save agent info: %s", e)

    def _load_agent_info(self) -> bool:
        """Reuse a previously saved agent session.

        Returns:
            True if valid agent info was loaded and the agent answers

        Note:
            Agent info is considered invalid if:
            - File doesn't exist or is not valid JSON
            - Info is older than the configured expiration
            - Platform doesn't match
            - Required environment variables are missing
            - Agent is not running
        """
        agent_info_file = self._config.agent_info_file
        if not os.path.exists(agent_info_file):
            return False

        try:
            with open(agent_info_file, "r", encoding=SystemConstants.DEFAULT_ENCODING) as f:
                agent_info = json.load(f)
        except (OSError, ValueError) as e:
            logger.debug("Failed to load agent info: %s", e)
            return False

        if time.time() - agent_info.get("timestamp", 0) > self._config.agent_expiration:
            logger.debug("Agent info too old")
            return False

        if agent_info.get("platform") != os.name:
            logger.debug("Agent info platform mismatch")
            return False

        auth_sock = agent_info.get(SSHAgentConstants.SSH_AUTH_SOCK_VAR)
        agent_pid = agent_info.get(SSHAgentConstants.SSH_AGENT_PID_VAR)
        if not auth_sock or not agent_pid:
            logger.debug("Missing required agent info")
            return False

        previous = {
            var: self.env.get(var)
            for var in (SSHAgentConstants.SSH_AUTH_SOCK_VAR, SSHAgentConstants.SSH_AGENT_PID_VAR)
        }
        self.env[SSHAgentConstants.SSH_AUTH_SOCK_VAR] = auth_sock
        self.env[SSHAgentConstants.SSH_AGENT_PID_VAR] = str(agent_pid)
        if self.is_agent_reachable():
            logger.debug("Reusing saved agent %s", agent_pid)
            return True

        for var, value in previous.items():
            if value is None:
                self.env.pop(var, None)
            else:
                self.env[var] = value
        return False

    def _start_ssh_agent(self) -> None:
        """Start a new agent and capture its session variables.

        Raises:
            AgentStartFailed: If ssh-agent cannot run or prints no socket
        """
        logger.debug("Starting SSH agent")
        result = run_command(["ssh-agent", "-s"], env=self.env)
        if result is None:
            raise AgentStartFailed("Failed to start ssh-agent")

        env_vars = parse_agent_output(result.stdout)
        auth_sock = env_vars.get(SSHAgentConstants.SSH_AUTH_SOCK_VAR)
        if not auth_sock:
            raise AgentStartFailed("ssh-agent did not report SSH_AUTH_SOCK")

        self.env.update(env_vars)
        agent_pid = env_vars.get(SSHAgentConstants.SSH_AGENT_PID_VAR)
        if agent_pid:
            self._save_agent_info(auth_sock, agent_pid)
        logger.info("SSH agent started (pid %s)", agent_pid)

    def ensure_agent_running(self) -> bool:
        """Make sure an agent is reachable, starting one if needed.

        Returns:
            bool: True if a new agent was started
        """
        if self.is_agent_reachable():
            logger.debug("SSH agent already running")
            return False
        if self._load_agent_info():
            return False
        self._start_ssh_agent()
        return True

    def is_key_loaded(self, key_path: str) -> bool:
        """Check the agent listing for a key.

        A key counts as loaded when its fingerprint, its path or its file
        name appears in ``ssh-add -l``.
        """
        result = self._ssh_add_list()
        if result is None or result.returncode != 0:
            return False

        fingerprint = public_key_fingerprint(key_path + SystemConstants.SSH_PUBLIC_KEY_EXTENSION)
        basename = os.path.basename(key_path)
        for line in result.stdout.splitlines():
            tokens = line.split()
            if fingerprint and fingerprint in tokens:
                return True
            if key_path in tokens or any(os.path.basename(token) == basename for token in tokens):
                return True
        return False

    def ensure_key_loaded(self, key_path: str) -> bool:
        """Load a private key into the agent unless it is already there.

        Args:
            key_path: Path to the private key

        Returns:
            bool: True if the key was added, False if it was already loaded

        Raises:
            KeyNotFound: If the key file does not exist
            AgentStartFailed: If no agent can be started
            KeyLoadFailed: If ssh-add rejects the key
        """
        if not os.path.isfile(key_path):
            raise KeyNotFound(f"SSH key not found: {key_path}")

        self.ensure_agent_running()

        if self.is_key_loaded(key_path):
            logger.info("Key already added: %s", key_path)
            added = False
        else:
            result = run_command(["ssh-add", key_path], check_output=False, env=self.env)
            if result is None or result.returncode != 0:
                stderr = result.stderr.strip() if result else "ssh-add not available"
                raise KeyLoadFailed(f"Failed to add key {key_path}: {stderr}")
            logger.info("Key added: %s", key_path)
            added = True

        self._session.write(key_path)
        return added
