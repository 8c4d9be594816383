"""Wiring of the wizard components and the automatic setup sequence."""

# Import built-in modules
import enum
import logging
from typing import Callable
from typing import List
from typing import Optional

# Import third-party modules
from github_ssh_wizard.agent import SSHAgentManager
from github_ssh_wizard.config import WizardConfig
from github_ssh_wizard.connectivity import ConnectionResult
from github_ssh_wizard.connectivity import ConnectivityTester
from github_ssh_wizard.constants import GitConstants
from github_ssh_wizard.constants import SSHAgentConstants
from github_ssh_wizard.environment import EnvironmentInfo
from github_ssh_wizard.environment import detect_environment
from github_ssh_wizard.exceptions import GitCommandError
from github_ssh_wizard.exceptions import NoKeysFound
from github_ssh_wizard.git import GitIntegration
from github_ssh_wizard.session import SessionCache
from github_ssh_wizard.ssh_config import HostAlias
from github_ssh_wizard.ssh_config import HostAliasConfigurator
from github_ssh_wizard.ssh_key_manager import KeyPair
from github_ssh_wizard.ssh_key_manager import SSHKeyManager


logger = logging.getLogger(__name__)


class SetupStage(enum.Enum):
    """Stages of the automatic sequence, in order."""

    START = "start"
    IDENTITY_SET = "identity_set"
    ALIASES_CONFIGURED = "aliases_configured"
    TESTED = "tested"
    DONE = "done"


class GitHubSSHWizard:
    """Builds every component around one shared configuration.

    The automatic sequence sets the Git identity, configures host aliases
    for all keys and tests the connection. A failing step stops the
    sequence; steps already done are not rolled back.
    """

    def __init__(self, config: Optional[WizardConfig] = None, env_info: Optional[EnvironmentInfo] = None):
        """Initialize the wizard.

        Args:
            config: Shared configuration, built from the environment if omitted
            env_info: Host environment, detected if omitted
        """
        self.config = config or WizardConfig.from_env()
        self.env_info = env_info or detect_environment()
        self.session = SessionCache(self.config.session_file)
        self.agent = SSHAgentManager(self.config, self.session)
        self.keys = SSHKeyManager(self.config, self.agent)
        self.git = GitIntegration(self.config, self.keys)
        self.aliases = HostAliasConfigurator(self.config, self.keys, self.agent)
        self.tester = ConnectivityTester(self.config, self.agent, self.session)
        self.stage = SetupStage.START

    def default_key(self) -> str:
        """Key used by manual actions: the session key or ``~/.ssh/id_ed25519``."""
        return self.session.read() or str(self.config.ssh_dir / SSHAgentConstants.DEFAULT_KEY_NAME)

    def provision_key(self, key_name: str, publish: Optional[Callable[[KeyPair], None]] = None) -> KeyPair:
        """Reuse or generate a key commented with the global Git email."""
        email = self.git.get_global(GitConstants.USER_EMAIL_KEY) or ""
        return self.keys.provision(key_name, comment=email, publish=publish)

    def rewrite_origin(
            self,
            selected_key: Optional[str] = None,
            select_key: Optional[Callable[[List[str]], str]] = None,
            repo_dir: Optional[str] = None
    ) -> str:
        return self.git.rewrite_origin(selected_key=selected_key, select_key=select_key, repo_dir=repo_dir)

    def configure_aliases(self) -> List[HostAlias]:
        """Run the alias configurator, downgrading an empty inventory to a warning."""
        try:
            return self.aliases.auto_configure()
        except NoKeysFound as e:
            logger.warning("%s", e)
            return []

    def run_automatic(self, name: str, email: str) -> ConnectionResult:
        """Run identity, alias and connectivity steps in order.

        Args:
            name: Global Git user.name
            email: Global Git user.email

        Returns:
            ConnectionResult: Outcome of the final connectivity test; the caller
            moves ``self.stage`` to DONE once the result is reported

        Raises:
            WizardError: The first fatal error; ``self.stage`` tells how far
            the sequence got
        """
        self.stage = SetupStage.START
        if not self.git.is_available():
            raise GitCommandError("git is not installed or not on PATH")

        self.git.set_identity(name, email)
        self.stage = SetupStage.IDENTITY_SET

        self.configure_aliases()
        self.stage = SetupStage.ALIASES_CONFIGURED

        result = self.tester.test()
        self.stage = SetupStage.TESTED
        return result
