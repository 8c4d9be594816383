"""Host alias blocks in the SSH client config."""

# Import built-in modules
from dataclasses import dataclass
import logging
import os
from typing import List
from typing import Set

# Import third-party modules
from github_ssh_wizard.config import WizardConfig
from github_ssh_wizard.constants import GitConstants
from github_ssh_wizard.constants import SSHAgentConstants
from github_ssh_wizard.constants import SystemConstants
from github_ssh_wizard.exceptions import NoKeysFound
from github_ssh_wizard.exceptions import SSHConfigError


logger = logging.getLogger(__name__)


def alias_name(key_path: str, prefix: str = GitConstants.ALIAS_PREFIX) -> str:
    """Derive the host alias for a key, e.g. ``id_ed25519`` -> ``github-id_ed25519``."""
    return prefix + os.path.basename(key_path)


@dataclass(frozen=True)
class HostAlias:
    """One ``Host`` block routing an alias to the real host with one key."""

    alias_name: str
    identity_file: str
    target_host: str = GitConstants.GITHUB_HOST
    login_user: str = GitConstants.GITHUB_LOGIN_USER

    def render(self) -> str:
        return (
            f"\nHost {self.alias_name}\n"
            f"    HostName {self.target_host}\n"
            f"    User {self.login_user}\n"
            f"    IdentityFile {self.identity_file}\n"
        )


class HostAliasConfigurator:
    """Appends one host alias per private key to the SSH client config.

    Blocks are only ever appended. Existing blocks are never rewritten and
    aliases whose key was deleted stay in place.
    """

    def __init__(self, config: WizardConfig, key_manager, agent):
        """Initialize the configurator.

        Args:
            config: Shared wizard configuration
            key_manager: SSHKeyManager providing the key inventory
            agent: SSHAgentManager loading each key
        """
        self._config = config
        self._key_manager = key_manager
        self._agent = agent

    @property
    def config_file(self):
        return self._config.ssh_config_file

    def _ensure_config_file(self) -> None:
        """Create the SSH directory and an empty private config if missing.

        Raises:
            SSHConfigError: If the directory or file cannot be created
        """
        ssh_dir = os.path.dirname(self.config_file)
        try:
            os.makedirs(ssh_dir, mode=SSHAgentConstants.SSH_DIR_PERMISSIONS, exist_ok=True)
            if not os.path.exists(self.config_file):
                with open(self.config_file, "a", encoding=SystemConstants.DEFAULT_ENCODING):
                    pass
                if os.name != SystemConstants.WINDOWS_PLATFORM:
                    os.chmod(self.config_file, SSHAgentConstants.SSH_CONFIG_PERMISSIONS)
        except OSError as e:
            raise SSHConfigError(f"Cannot prepare SSH config {self.config_file}: {e}") from e

    def list_aliases(self) -> Set[str]:
        """Return every host pattern named on a ``Host`` line."""
        if not os.path.exists(self.config_file):
            return set()

        aliases = set()
        try:
            with open(self.config_file, "r", encoding=SystemConstants.DEFAULT_ENCODING) as f:
                for line in f:
                    parts = line.strip().split()
                    if len(parts) > 1 and parts[0].lower() == "host":
                        aliases.update(parts[1:])
        except OSError as e:
            raise SSHConfigError(f"Cannot read SSH config {self.config_file}: {e}") from e
        return aliases

    def has_alias(self, name: str) -> bool:
        return name in self.list_aliases()

    def add_alias(self, key_path: str) -> HostAlias:
        """Append the alias block for a key; the caller checks for duplicates."""
        entry = HostAlias(
            alias_name=alias_name(key_path, self._config.alias_prefix),
            identity_file=key_path,
            target_host=self._config.target_host,
            login_user=self._config.login_user,
        )
        try:
            with open(self.config_file, "a", encoding=SystemConstants.DEFAULT_ENCODING) as f:
                f.write(entry.render())
        except OSError as e:
            raise SSHConfigError(f"Cannot write SSH config {self.config_file}: {e}") from e
        logger.debug("Appended host alias %s for %s", entry.alias_name, key_path)
        return entry

    def auto_configure(self) -> List[HostAlias]:
        """Ensure every inventoried key has an alias and is loaded.

        Returns:
            List[HostAlias]: Aliases appended by this call

        Raises:
            NoKeysFound: If the SSH directory holds no private keys
            SSHConfigError: If the SSH config cannot be read or written
        """
        self._agent.ensure_agent_running()
        self._ensure_config_file()

        keys = self._key_manager.list_keys()
        if not keys:
            raise NoKeysFound(f"No SSH keys found in {self._config.ssh_dir}")

        added = []
        for key_path in keys:
            if not os.path.isfile(key_path):
                logger.debug("Skipping %s, not a regular file", key_path)
                continue
            name = alias_name(key_path, self._config.alias_prefix)
            if not self.has_alias(name):
                added.append(self.add_alias(key_path))
            self._agent.ensure_key_loaded(key_path)
        return added
