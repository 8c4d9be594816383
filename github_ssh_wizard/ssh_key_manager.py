"""SSH key inventory and key pair provisioning."""

# Import built-in modules
import base64
from dataclasses import dataclass
import hashlib
import logging
import os
from pathlib import Path
from typing import Callable
from typing import List
from typing import Optional
from typing import Union

# Import third-party modules
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from github_ssh_wizard.config import WizardConfig
from github_ssh_wizard.constants import SSHAgentConstants
from github_ssh_wizard.constants import SystemConstants
from github_ssh_wizard.exceptions import KeygenFailed
from github_ssh_wizard.utils import run_command


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPair:
    """A private key and its public counterpart on disk."""

    private_path: str

    @property
    def public_path(self) -> str:
        return self.private_path + SystemConstants.SSH_PUBLIC_KEY_EXTENSION

    @property
    def name(self) -> str:
        return os.path.basename(self.private_path)

    def read_public_key(self) -> Optional[str]:
        """Return the public key line, or None when the .pub file is missing."""
        try:
            return Path(self.public_path).read_text(encoding=SystemConstants.DEFAULT_ENCODING).strip()
        except OSError:
            return None


def public_key_fingerprint(public_key_file: Union[str, Path]) -> Optional[str]:
    """Compute the OpenSSH SHA256 fingerprint of a public key file.

    Args:
        public_key_file: Path to an OpenSSH ``.pub`` file

    Returns:
        str: Fingerprint as printed by ``ssh-add -l`` (``SHA256:...``), or None
        if the file is missing or holds a key type cryptography cannot parse
    """
    try:
        data = Path(public_key_file).read_bytes()
        public_key = serialization.load_ssh_public_key(data)
    except (OSError, ValueError, UnsupportedAlgorithm) as e:
        logger.debug("Cannot fingerprint %s: %s", public_key_file, e)
        return None

    blob = public_key.public_bytes(
        serialization.Encoding.OpenSSH,
        serialization.PublicFormat.OpenSSH
    ).split()[1]
    digest = hashlib.sha256(base64.b64decode(blob)).digest()
    return "SHA256:" + base64.b64encode(digest).decode("ascii").rstrip("=")


class SSHKeyManager:
    """Lists private keys in the SSH directory and creates new ones."""

    def __init__(self, config: WizardConfig, agent=None):
        """Initialize the key manager.

        Args:
            config: Shared wizard configuration
            agent: SSHAgentManager used to load provisioned keys
        """
        self._config = config
        self._agent = agent

    @property
    def ssh_dir(self) -> Path:
        return self._config.ssh_dir

    def list_keys(self) -> List[str]:
        """List private key files in the SSH directory.

        Returns:
            List[str]: Absolute paths of entries named ``id_*`` that are not
            ``.pub`` files, sorted by name; empty if the directory is missing
        """
        try:
            names = os.listdir(self.ssh_dir)
        except OSError:
            logger.debug("SSH directory not readable: %s", self.ssh_dir)
            return []

        keys = [
            os.path.abspath(os.path.join(self.ssh_dir, name))
            for name in sorted(names)
            if name.startswith(self._config.key_prefix)
            and not name.endswith(SystemConstants.SSH_PUBLIC_KEY_EXTENSION)
        ]
        logger.debug("Found %d private keys in %s", len(keys), self.ssh_dir)
        return keys

    def resolve_key_path(self, key_name: str) -> str:
        """Resolve a key file name inside the SSH directory."""
        if not key_name or os.path.basename(key_name) != key_name or key_name in (".", ".."):
            raise KeygenFailed(f"Invalid SSH key name: {key_name!r}")
        return str(self.ssh_dir / key_name)

    def generate_key(self, key_path: str, comment: str = "") -> KeyPair:
        """Generate an ed25519 key pair without a passphrase.

        Args:
            key_path: Destination of the private key
            comment: Key comment, usually the Git email

        Raises:
            KeygenFailed: If ssh-keygen fails or cannot be run
        """
        try:
            os.makedirs(self.ssh_dir, mode=SSHAgentConstants.SSH_DIR_PERMISSIONS, exist_ok=True)
        except OSError as e:
            raise KeygenFailed(f"Cannot create {self.ssh_dir}: {e}") from e
        result = run_command(
            [
                "ssh-keygen",
                "-t", SSHAgentConstants.KEY_TYPE,
                "-C", comment,
                "-f", key_path,
                "-N", "",
                "-q",
            ],
            check_output=False,
            env=self._config.env
        )
        if result is None or result.returncode != 0:
            stderr = result.stderr.strip() if result else "ssh-keygen not available"
            raise KeygenFailed(f"Failed to generate {key_path}: {stderr}")
        logger.info("Generated SSH key %s", key_path)
        return KeyPair(key_path)

    def provision(
            self,
            key_name: str,
            comment: str = "",
            publish: Optional[Callable[[KeyPair], None]] = None
    ) -> KeyPair:
        """Reuse or generate a key pair, then load it into the agent.

        Args:
            key_name: File name of the private key inside the SSH directory
            comment: Comment for a newly generated key
            publish: Called with the key pair before it is loaded, e.g. to
                show or copy the public key

        Returns:
            KeyPair: The reused or generated key pair
        """
        key_path = self.resolve_key_path(key_name)
        if os.path.exists(key_path):
            logger.info("Key exists, reusing %s", key_path)
            key_pair = KeyPair(key_path)
        else:
            key_pair = self.generate_key(key_path, comment)

        if publish is not None:
            publish(key_pair)

        if self._agent is not None:
            self._agent.ensure_key_loaded(key_pair.private_path)
        return key_pair
