# Import third-party modules
from github_ssh_wizard.config import WizardConfig
from github_ssh_wizard.core import GitHubSSHWizard
from github_ssh_wizard.exceptions import WizardError


__all__ = ["GitHubSSHWizard", "WizardConfig", "WizardError"]
