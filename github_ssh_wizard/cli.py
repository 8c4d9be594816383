"""Command-line interface for github-ssh-wizard."""

# Import built-in modules
import logging
import os
import sys
from typing import Callable
from typing import Dict
from typing import List
from typing import Optional

# Import third-party modules
import click
from github_ssh_wizard.__version__ import __version__
from github_ssh_wizard.connectivity import AuthStatus
from github_ssh_wizard.connectivity import ConnectionResult
from github_ssh_wizard.constants import CLIConstants
from github_ssh_wizard.constants import GitConstants
from github_ssh_wizard.constants import LoggingConstants
from github_ssh_wizard.constants import SSHAgentConstants
from github_ssh_wizard.constants import SystemConstants
from github_ssh_wizard.core import GitHubSSHWizard
from github_ssh_wizard.core import SetupStage
from github_ssh_wizard.environment import copy_to_clipboard
from github_ssh_wizard.exceptions import WizardError
from github_ssh_wizard.ssh_key_manager import KeyPair
from loguru import logger


class InterceptHandler(logging.Handler):
    """Forward standard logging records to loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: Optional[str] = None) -> None:
    """Configure loguru and route the library loggers through it.

    Args:
        level: Log level, defaults to ``$GITHUB_SSH_WIZARD_LOG_LEVEL`` or INFO
    """
    level = (level or os.environ.get(LoggingConstants.LOG_LEVEL_ENV_VAR) or LoggingConstants.DEFAULT_LEVEL).upper()
    log_format = (
        LoggingConstants.DEBUG_LOG_FORMAT
        if level == LoggingConstants.DEBUG_LEVEL
        else LoggingConstants.DEFAULT_LOG_FORMAT
    )
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, format=log_format, level=level)
    logging.basicConfig(handlers=[InterceptHandler()], level=getattr(logging, level, logging.INFO), force=True)


def _default_user() -> str:
    return (
        os.environ.get(SystemConstants.ENV_USER)
        or os.environ.get(SystemConstants.ENV_USERNAME)
        or SystemConstants.UNKNOWN_USER
    )


def print_banner() -> None:
    line = "=" * 39
    click.secho(line, bold=True)
    click.secho(f"   GitHub SSH Setup Wizard {__version__}".center(39), bold=True)
    click.secho(line, bold=True)


def report_connection(result: ConnectionResult) -> None:
    """Show the handshake output and its classification."""
    if result.output:
        click.secho(result.output, fg="blue")
    if result.status is AuthStatus.AUTHENTICATED:
        who = f" as {result.username}" if result.username else ""
        logger.success(f"✅ SSH key is correctly added to GitHub{who}!")
    elif result.status is AuthStatus.DENIED:
        logger.warning("⚠️ GitHub denied the key. Add the public key to your GitHub account and try again.")
    else:
        logger.warning("⚠️ Unexpected SSH response. If you see 'Hi <user>!', SSH works.")


def publish_public_key(wizard: GitHubSSHWizard, key_pair: KeyPair) -> None:
    """Print a public key and try to copy it to the clipboard."""
    public_key = key_pair.read_public_key()
    if public_key is None:
        logger.warning(f"⚠️ Public key not found: {key_pair.public_path}")
        return

    click.echo("\nCopy this public key to GitHub:\n")
    click.echo(public_key)
    click.echo("")
    if copy_to_clipboard(public_key, wizard.env_info):
        logger.success("✅ Public key copied to clipboard")
    else:
        logger.warning(f"⚠️ Could not copy automatically. File: {key_pair.public_path}")


def prompt_key_choice(keys: List[str]) -> str:
    """Ask which key a repository should use."""
    click.echo("Multiple SSH keys detected. Choose one for this repo:")
    for index, key in enumerate(keys, start=1):
        click.echo(f"  {index}) {key}")
    choice = click.prompt("Key number", type=click.IntRange(1, len(keys)))
    return keys[choice - 1]


def configure_identity(wizard: GitHubSSHWizard) -> None:
    """Prompt for and set the global Git identity."""
    name = click.prompt("Enter Git user.name", default=wizard.git.get_global(GitConstants.USER_NAME_KEY))
    email = click.prompt("Enter Git user.email", default=wizard.git.get_global(GitConstants.USER_EMAIL_KEY))
    wizard.git.set_identity(name, email)
    logger.success("✅ Git global config updated")


def generate_or_use_key(wizard: GitHubSSHWizard) -> None:
    """Reuse or generate a key, publish it and load it into the agent."""
    key_name = click.prompt("Enter SSH key name", default=SSHAgentConstants.DEFAULT_KEY_NAME)
    key_pair = wizard.provision_key(key_name, publish=lambda pair: publish_public_key(wizard, pair))
    logger.success(f"✅ SSH key ready: {key_pair.private_path}")


def add_key_to_agent(wizard: GitHubSSHWizard) -> None:
    # The agent manager reports whether the key was added or already loaded
    wizard.agent.ensure_key_loaded(wizard.default_key())


def check_connection(wizard: GitHubSSHWizard, verbose: bool = False) -> None:
    report_connection(wizard.tester.test(verbose=verbose))


def list_ssh_keys(wizard: GitHubSSHWizard) -> None:
    keys = wizard.keys.list_keys()
    if not keys:
        logger.warning("No SSH keys found")
        return
    click.secho("Detected SSH private keys:", bold=True)
    for key in keys:
        click.echo(f"  {key}")


def auto_configure_aliases(wizard: GitHubSSHWizard) -> None:
    """Add a host alias for every key in the SSH directory."""
    logger.info("🔧 Auto-configuring SSH config for keys...")
    for entry in wizard.configure_aliases():
        logger.success(f"Added host alias: {entry.alias_name} -> {entry.identity_file}")


def update_remote(wizard: GitHubSSHWizard) -> None:
    """Point origin of the current repository at a host alias."""
    new_url = wizard.rewrite_origin(select_key=prompt_key_choice)
    logger.success(f"✅ Git remote updated to {new_url}")


def run_action(action: Callable[[GitHubSSHWizard], None], wizard: GitHubSSHWizard) -> bool:
    """Run one action, reporting wizard errors instead of raising.

    Returns:
        bool: True if the action completed
    """
    try:
        action(wizard)
        return True
    except WizardError as e:
        if e.fatal:
            logger.error(f"❌ {e}")
        else:
            logger.warning(f"⚠️ {e}")
        return False


def manual_actions() -> Dict[str, Callable[[GitHubSSHWizard], None]]:
    return {
        "1": configure_identity,
        "2": generate_or_use_key,
        "3": add_key_to_agent,
        "4": check_connection,
        "5": lambda wizard: check_connection(wizard, verbose=True),
        "6": list_ssh_keys,
        "7": auto_configure_aliases,
        "8": update_remote,
    }


def manual_mode(wizard: GitHubSSHWizard) -> None:
    """Menu loop; a failing action never ends the loop."""
    actions = manual_actions()
    exit_choice = str(len(CLIConstants.MENU_ITEMS))
    while True:
        click.echo("\nSelect an action:")
        for number, label in enumerate(CLIConstants.MENU_ITEMS, start=1):
            click.echo(f"{number}) {label}")
        choice = click.prompt(f"Enter choice [1-{exit_choice}]", default="", show_default=False).strip()

        if choice == exit_choice:
            logger.success("Exiting wizard.")
            break
        action = actions.get(choice)
        if action is None:
            logger.error("Invalid choice.")
            continue
        run_action(action, wizard)


def automatic_mode(wizard: GitHubSSHWizard) -> None:
    """Identity, host aliases and connection test in one go."""
    logger.info("🚀 Running Automatic Mode...")
    user = _default_user()
    name = click.prompt("Enter GitHub user.name", default=user)
    email = click.prompt("Enter GitHub email", default=f"{user}@{CLIConstants.DEFAULT_EMAIL_DOMAIN}")

    try:
        result = wizard.run_automatic(name, email)
    except WizardError as e:
        logger.error(f"❌ Automatic setup stopped at stage '{wizard.stage.value}': {e}")
        sys.exit(1)

    report_connection(result)
    wizard.stage = SetupStage.DONE
    logger.success("✅ Automatic setup completed!")


@click.command(help="Set up Git identity, SSH keys and host aliases for several GitHub accounts")
@click.version_option(__version__, prog_name="github-ssh-wizard")
def main():
    """Main entry point for CLI."""
    setup_logging()
    print_banner()
    wizard = GitHubSSHWizard()

    mode = click.prompt(
        "Select mode: 1) Automatic 2) Manual",
        default=CLIConstants.MODE_AUTOMATIC,
        type=click.Choice([CLIConstants.MODE_AUTOMATIC, CLIConstants.MODE_MANUAL]),
        show_choices=False,
    )
    if mode == CLIConstants.MODE_AUTOMATIC:
        automatic_mode(wizard)
    else:
        manual_mode(wizard)


if __name__ == "__main__":
    main()
