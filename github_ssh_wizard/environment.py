"""Host environment detection and clipboard export."""

# Import built-in modules
from dataclasses import dataclass
import logging
import os
import platform
import re

# Import third-party modules
from github_ssh_wizard.constants import SystemConstants
import pyperclip


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnvironmentInfo:
    """What kind of host the wizard runs on."""

    is_docker: bool = False
    is_wsl: bool = False
    system: str = ""


def _read_marker(path: str) -> str:
    try:
        with open(path, "r", encoding=SystemConstants.DEFAULT_ENCODING, errors="replace") as f:
            return f.read()
    except OSError:
        return ""


def detect_environment(
        proc_version: str = SystemConstants.PROC_VERSION_PATH,
        dockerenv: str = SystemConstants.DOCKERENV_PATH,
        init_cgroup: str = SystemConstants.INIT_CGROUP_PATH
) -> EnvironmentInfo:
    """Inspect well-known marker files to classify the host.

    Args:
        proc_version: Kernel version file, mentions Microsoft/WSL under WSL
        dockerenv: File Docker creates at the container root
        init_cgroup: cgroup membership of PID 1

    Returns:
        EnvironmentInfo: Detected flags; missing markers count as False
    """
    is_wsl = bool(re.search(r"microsoft|wsl", _read_marker(proc_version), re.IGNORECASE))
    is_docker = os.path.exists(dockerenv) or "docker" in _read_marker(init_cgroup)
    info = EnvironmentInfo(is_docker=is_docker, is_wsl=is_wsl, system=platform.system())
    logger.debug("Detected environment: %s", info)
    return info


def copy_to_clipboard(text: str, env_info: EnvironmentInfo) -> bool:
    """Copy text to the system clipboard.

    pyperclip picks the platform mechanism itself (xclip/xsel/wl-copy,
    pbcopy, clip.exe under WSL). Containers have no clipboard, so nothing
    is attempted there.

    Args:
        text: Text to copy
        env_info: Result of :func:`detect_environment`

    Returns:
        bool: True if the clipboard accepted the text
    """
    if env_info.is_docker:
        logger.debug("Running in a container, skipping clipboard copy")
        return False
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.debug("Clipboard copy failed: %s", e)
        return False
    return True
