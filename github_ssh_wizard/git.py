"""Git identity and origin remote configuration."""

# Import built-in modules
import logging
import os
import shutil
from typing import Callable
from typing import List
from typing import Optional

# Import third-party modules
from github_ssh_wizard.config import WizardConfig
from github_ssh_wizard.constants import GitConstants
from github_ssh_wizard.exceptions import GitCommandError
from github_ssh_wizard.exceptions import NoKeysFound
from github_ssh_wizard.exceptions import NoOriginConfigured
from github_ssh_wizard.exceptions import NotAGitRepo
from github_ssh_wizard.exceptions import UnrecognizedRemoteFormat
from github_ssh_wizard.ssh_config import alias_name
from github_ssh_wizard.utils import extract_repo_path
from github_ssh_wizard.utils import run_command


logger = logging.getLogger(__name__)


class GitIntegration:
    """Writes the global Git identity and points remotes at host aliases."""

    def __init__(self, config: WizardConfig, key_manager=None):
        """Initialize Git integration.

        Args:
            config: Shared wizard configuration
            key_manager: SSHKeyManager used to pick a key for the remote
        """
        self._config = config
        self._key_manager = key_manager

    @staticmethod
    def is_available() -> bool:
        """Check whether git is on PATH."""
        return shutil.which("git") is not None

    def _git(self, *args: str, cwd: Optional[str] = None):
        return run_command(["git", *args], check_output=False, env=self._config.env, cwd=cwd)

    def get_global(self, key: str) -> Optional[str]:
        """Read a global git config value, None when unset."""
        result = self._git("config", "--global", "--get", key)
        if result is None or result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def set_global(self, key: str, value: str) -> None:
        """Write a global git config value.

        Raises:
            GitCommandError: If git config fails
        """
        result = self._git("config", "--global", key, value)
        if result is None or result.returncode != 0:
            stderr = result.stderr.strip() if result else "git not available"
            raise GitCommandError(f"Failed to set {key}: {stderr}")

    def set_identity(self, name: str, email: str) -> None:
        """Set the global user.name and user.email."""
        self.set_global(GitConstants.USER_NAME_KEY, name)
        self.set_global(GitConstants.USER_EMAIL_KEY, email)
        logger.debug("Git identity set to %s <%s>", name, email)

    def get_origin_url(self, repo_dir: str) -> Optional[str]:
        result = self._git("config", "--get", f"remote.{GitConstants.ORIGIN_REMOTE}.url", cwd=repo_dir)
        if result is None or result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def _choose_key(
            self,
            selected_key: Optional[str],
            select_key: Optional[Callable[[List[str]], str]]
    ) -> str:
        if selected_key:
            return selected_key

        keys = self._key_manager.list_keys() if self._key_manager is not None else []
        if not keys:
            raise NoKeysFound(f"No SSH keys found in {self._config.ssh_dir}")
        if len(keys) == 1:
            return keys[0]
        if select_key is None:
            raise ValueError("Several SSH keys found, a key must be selected")
        return select_key(keys)

    def rewrite_origin(
            self,
            selected_key: Optional[str] = None,
            select_key: Optional[Callable[[List[str]], str]] = None,
            repo_dir: Optional[str] = None
    ) -> str:
        """Point the origin remote at the host alias of a key.

        Args:
            selected_key: Key whose alias the remote should use
            select_key: Called with the inventory when several keys exist
                and no key was given
            repo_dir: Repository directory, defaults to the current directory

        Returns:
            str: The new origin URL, ``git@<alias>:<owner>/<repo>``

        Raises:
            NotAGitRepo: If ``repo_dir`` has no ``.git``
            NoOriginConfigured: If origin has no URL
            NoKeysFound: If no key is given and none exist
            UnrecognizedRemoteFormat: If the URL is not a GitHub remote
        """
        repo_dir = repo_dir or os.getcwd()
        if not os.path.exists(os.path.join(repo_dir, ".git")):
            raise NotAGitRepo(f"Not a git repository: {repo_dir}")

        origin_url = self.get_origin_url(repo_dir)
        if not origin_url:
            raise NoOriginConfigured("No remote.origin.url set")

        repo_path = extract_repo_path(origin_url, self._config.alias_prefix)
        if repo_path is None:
            raise UnrecognizedRemoteFormat(f"Unrecognized remote URL: {origin_url}")

        key_path = self._choose_key(selected_key, select_key)
        alias = alias_name(key_path, self._config.alias_prefix)
        new_url = f"{self._config.login_user}@{alias}:{repo_path}"

        result = self._git("remote", "set-url", GitConstants.ORIGIN_REMOTE, new_url, cwd=repo_dir)
        if result is None or result.returncode != 0:
            stderr = result.stderr.strip() if result else "git not available"
            raise GitCommandError(f"Failed to update origin: {stderr}")
        logger.debug("Origin changed from %s to %s", origin_url, new_url)
        return new_url
