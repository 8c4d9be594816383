"""Single-slot cache of the most recently used private key."""

# Import built-in modules
import logging
from pathlib import Path
from typing import Optional
from typing import Union

# Import third-party modules
from github_ssh_wizard.constants import SystemConstants


logger = logging.getLogger(__name__)


class SessionCache:
    """Remembers the last private key added to the agent."""

    def __init__(self, session_file: Union[str, Path]):
        self.session_file = Path(session_file)

    def read(self) -> Optional[str]:
        """Return the cached key path, or None if nothing was recorded."""
        if not self.session_file.is_file():
            return None
        try:
            content = self.session_file.read_text(encoding=SystemConstants.DEFAULT_ENCODING).strip()
        except OSError as e:
            logger.warning("Failed to read session cache %s: %s", self.session_file, e)
            return None
        return content or None

    def write(self, key_path: Union[str, Path]) -> bool:
        """Overwrite the cached key path.

        Note:
            This method will not raise exceptions, only log errors
        """
        try:
            self.session_file.write_text(f"{key_path}\n", encoding=SystemConstants.DEFAULT_ENCODING)
        except OSError as e:
            logger.error("Failed to write session cache %s: %s", self.session_file, e)
            return False
        logger.debug("Session key set to %s", key_path)
        return True
