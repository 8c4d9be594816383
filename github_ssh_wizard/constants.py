"""Constants shared across the wizard components."""

# Import built-in modules
from typing import ClassVar
from typing import List


class SSHAgentConstants:
    """SSH agent and key related constants."""

    SSH_DIR_NAME: ClassVar[str] = ".ssh"
    SSH_CONFIG_FILE: ClassVar[str] = "config"
    AGENT_INFO_FILE: ClassVar[str] = "agent_info.json"

    # Agent session environment variables
    SSH_AUTH_SOCK_VAR: ClassVar[str] = "SSH_AUTH_SOCK"
    SSH_AGENT_PID_VAR: ClassVar[str] = "SSH_AGENT_PID"

    # Saved agent sessions older than this are ignored (seconds)
    DEFAULT_EXPIRATION_TIME: ClassVar[int] = 86400

    # `ssh-add -l` exit status when no agent can be reached
    AGENT_UNREACHABLE_EXIT_CODE: ClassVar[int] = 2

    # Private keys are recognised by this prefix
    KEY_PREFIX: ClassVar[str] = "id_"
    DEFAULT_KEY_NAME: ClassVar[str] = "id_ed25519"
    KEY_TYPE: ClassVar[str] = "ed25519"

    SSH_DIR_PERMISSIONS: ClassVar[int] = 0o700
    SSH_CONFIG_PERMISSIONS: ClassVar[int] = 0o600

    SSH_TEST_OPTIONS: ClassVar[List[str]] = ["-o", "StrictHostKeyChecking=accept-new"]


class GitConstants:
    """Git and GitHub related constants."""

    GITHUB_HOST: ClassVar[str] = "github.com"
    GITHUB_LOGIN_USER: ClassVar[str] = "git"
    ALIAS_PREFIX: ClassVar[str] = "github-"
    ORIGIN_REMOTE: ClassVar[str] = "origin"

    USER_NAME_KEY: ClassVar[str] = "user.name"
    USER_EMAIL_KEY: ClassVar[str] = "user.email"

    # Greeting fragments GitHub prints on a successful `ssh -T`
    AUTH_SUCCESS_PATTERNS: ClassVar[List[str]] = [
        r"Hi (?P<user>[^!\s]+)!",
        r"successfully authenticated",
    ]
    AUTH_DENIED_PATTERN: ClassVar[str] = r"Permission denied"


class CLIConstants:
    """Interactive CLI constants."""

    MODE_AUTOMATIC: ClassVar[str] = "1"
    MODE_MANUAL: ClassVar[str] = "2"

    SESSION_FILE_NAME: ClassVar[str] = ".github_setup_session"
    DEFAULT_EMAIL_DOMAIN: ClassVar[str] = "example.com"

    MENU_ITEMS: ClassVar[List[str]] = [
        "Configure Git global user/email",
        "Generate or use SSH key",
        "Add SSH key to ssh-agent",
        "Test SSH connection",
        "Verbose SSH test",
        "List all SSH keys",
        "Auto-configure all SSH keys in ~/.ssh/config",
        "Auto-update Git remote URL for current repo",
        "Exit",
    ]


class SystemConstants:
    """System and platform constants."""

    ENV_HOME: ClassVar[str] = "HOME"
    ENV_USER: ClassVar[str] = "USER"
    ENV_USERNAME: ClassVar[str] = "USERNAME"
    UNKNOWN_USER: ClassVar[str] = "user"

    WINDOWS_PLATFORM: ClassVar[str] = "nt"

    DEFAULT_ENCODING: ClassVar[str] = "utf-8"
    FALLBACK_ENCODING: ClassVar[str] = "latin-1"

    SSH_PUBLIC_KEY_EXTENSION: ClassVar[str] = ".pub"

    # Environment detection markers
    PROC_VERSION_PATH: ClassVar[str] = "/proc/version"
    DOCKERENV_PATH: ClassVar[str] = "/.dockerenv"
    INIT_CGROUP_PATH: ClassVar[str] = "/proc/1/cgroup"


class LoggingConstants:
    """Logging constants."""

    LOG_LEVEL_ENV_VAR: ClassVar[str] = "GITHUB_SSH_WIZARD_LOG_LEVEL"
    DEFAULT_LEVEL: ClassVar[str] = "INFO"
    DEBUG_LEVEL: ClassVar[str] = "DEBUG"

    DEFAULT_LOG_FORMAT: ClassVar[str] = "<level>{message}</level>"
    DEBUG_LOG_FORMAT: ClassVar[str] = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )
