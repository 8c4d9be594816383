"""Configuration context shared by every wizard component."""

# Import built-in modules
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Dict
from typing import Optional

# Import third-party modules
from github_ssh_wizard.constants import CLIConstants
from github_ssh_wizard.constants import GitConstants
from github_ssh_wizard.constants import SSHAgentConstants
from github_ssh_wizard.constants import SystemConstants


@dataclass
class WizardConfig:
    """Process-wide configuration for a wizard run.

    The ``env`` mapping carries the agent session variables between
    components; every subprocess the wizard spawns receives it, so starting
    an agent in one step is visible to all later steps.

    Attributes:
        home: User home directory
        ssh_dir: SSH directory, defaults to ``home/.ssh``
        ssh_config_file: SSH client config, defaults to ``ssh_dir/config``
        session_file: Session cache file, defaults to ``home/.github_setup_session``
        agent_info_file: Saved agent session, defaults to ``ssh_dir/agent_info.json``
        alias_prefix: Prefix of generated host aliases
        target_host: Real host every alias points to
        login_user: SSH login user for the target host
        key_prefix: File name prefix identifying private keys
        agent_expiration: Seconds after which a saved agent session is ignored
        env: Environment passed to subprocesses
    """

    home: Optional[Path] = None
    ssh_dir: Optional[Path] = None
    ssh_config_file: Optional[Path] = None
    session_file: Optional[Path] = None
    agent_info_file: Optional[Path] = None
    alias_prefix: str = GitConstants.ALIAS_PREFIX
    target_host: str = GitConstants.GITHUB_HOST
    login_user: str = GitConstants.GITHUB_LOGIN_USER
    key_prefix: str = SSHAgentConstants.KEY_PREFIX
    agent_expiration: int = SSHAgentConstants.DEFAULT_EXPIRATION_TIME
    env: Optional[Dict[str, str]] = None

    def __post_init__(self):
        """Derive unset paths from the home directory."""
        if self.home is None:
            self.home = Path.home()
        self.home = Path(self.home)
        if self.ssh_dir is None:
            self.ssh_dir = self.home / SSHAgentConstants.SSH_DIR_NAME
        self.ssh_dir = Path(self.ssh_dir)
        if self.ssh_config_file is None:
            self.ssh_config_file = self.ssh_dir / SSHAgentConstants.SSH_CONFIG_FILE
        if self.session_file is None:
            self.session_file = self.home / CLIConstants.SESSION_FILE_NAME
        if self.agent_info_file is None:
            self.agent_info_file = self.ssh_dir / SSHAgentConstants.AGENT_INFO_FILE
        if self.env is None:
            self.env = os.environ.copy()

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "WizardConfig":
        """Build a configuration from the process environment.

        Args:
            environ: Environment mapping, defaults to ``os.environ``

        Returns:
            WizardConfig: Configuration rooted at ``$HOME``
        """
        environ = dict(os.environ if environ is None else environ)
        home = environ.get(SystemConstants.ENV_HOME) or os.path.expanduser("~")
        return cls(home=Path(home), env=environ)
