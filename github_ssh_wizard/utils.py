"""Helpers for running external tools and parsing their output."""

# Import built-in modules
import logging
import os
import re
import subprocess
from typing import Dict
from typing import List
from typing import Optional
from typing import Union

# Import third-party modules
from github_ssh_wizard.constants import GitConstants
from github_ssh_wizard.constants import SystemConstants


logger = logging.getLogger(__name__)


def _decode_subprocess_output(output: Union[str, bytes, None]) -> str:
    """Safely decode command output.

    Args:
        output: String or bytes output from command

    Returns:
        str: Decoded string
    """
    if not output:
        return ""
    if isinstance(output, str):
        return output
    try:
        return output.decode(SystemConstants.DEFAULT_ENCODING)
    except UnicodeDecodeError:
        return output.decode(SystemConstants.FALLBACK_ENCODING)


def run_command(
        cmd: List[str],
        check_output: bool = True,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[str] = None,
        input: Optional[str] = None,
        timeout: Optional[int] = None
) -> Optional[subprocess.CompletedProcess]:
    """Run a command and handle its output.

    Args:
        cmd: Command and arguments to run
        check_output: Return None when the command exits non-zero
        env: Environment variables to use
        cwd: Working directory for the command
        input: Text passed to the command's stdin
        timeout: Timeout in seconds for the command

    Returns:
        CompletedProcess instance with decoded output, or None if the command
        could not run (or failed while ``check_output`` is set)
    """
    try:
        if env is None:
            env = os.environ.copy()

        logger.debug("Running command: %s", " ".join(cmd))
        result = subprocess.run(
            cmd,
            env=env,
            cwd=cwd,
            input=input.encode(SystemConstants.DEFAULT_ENCODING) if input is not None else None,
            capture_output=True,
            check=False,
            timeout=timeout
        )
        result.stdout = _decode_subprocess_output(result.stdout)
        result.stderr = _decode_subprocess_output(result.stderr)

        if check_output and result.returncode != 0:
            logger.debug("Command failed with exit code %d", result.returncode)
            if result.stderr:
                logger.debug("stderr: %s", result.stderr.strip())
            return None

        return result

    except subprocess.TimeoutExpired as e:
        logger.error("Command timed out after %s seconds: %s", timeout, e)
        return None
    except OSError as e:
        logger.error("Command failed: %s", e)
        return None


def extract_repo_path(url: str, alias_prefix: str = GitConstants.ALIAS_PREFIX) -> Optional[str]:
    """Extract the ``owner/repo`` part of a GitHub remote URL.

    Args:
        url: Remote URL to parse
        alias_prefix: Prefix of host aliases; an alias suffix is a key file
            name made of word characters and dashes, so dotted hosts such as
            ``github-evil.com`` are rejected

    Returns:
        str: Repository path (keeps a trailing ``.git``) or None if the URL is
        not a GitHub style remote

    Note:
        Valid formats:
        - git@github.com:owner/repo.git
        - ssh://git@github.com/owner/repo.git
        - https://github.com/owner/repo.git
        - git@github-id_ed25519:owner/repo.git (already aliased)
    """
    if not url or not isinstance(url, str):
        return None

    pattern = (
        r"(?:^|[@/])"
        rf"(?:{re.escape(GitConstants.GITHUB_HOST)}|{re.escape(alias_prefix)}[\w-]+)"
        r"[:/](?P<path>[\w.-]+/[\w.-]+?)/?$"
    )
    match = re.search(pattern, url.strip())
    if not match:
        return None
    return match.group("path")
