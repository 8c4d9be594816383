"""Exceptions raised by the wizard components."""


class WizardError(Exception):
    """Base exception for wizard errors.

    ``fatal`` tells the caller whether the current operation must abort or
    whether a warning is enough.
    """

    fatal = True


class KeyNotFound(WizardError):
    """The private key file does not exist."""


class KeygenFailed(WizardError):
    """ssh-keygen could not create the key pair."""


class KeyLoadFailed(WizardError):
    """ssh-add could not load the key into the agent."""


class AgentStartFailed(WizardError):
    """No ssh-agent could be started or reached."""


class NoKeysFound(WizardError):
    """The SSH directory holds no private keys."""

    fatal = False


class GitCommandError(WizardError):
    """A git command failed or git is not installed."""


class NotAGitRepo(WizardError):
    """The working directory has no repository metadata."""


class NoOriginConfigured(WizardError):
    """The repository has no origin remote URL."""


class UnrecognizedRemoteFormat(WizardError):
    """The origin URL does not look like a GitHub remote."""


class SSHConfigError(WizardError):
    """The SSH directory or client config cannot be read or written."""
