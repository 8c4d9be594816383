"""Tests for the GitHub authentication test."""

# Import third-party modules
from github_ssh_wizard.agent import SSHAgentManager
from github_ssh_wizard.connectivity import AuthStatus
from github_ssh_wizard.connectivity import ConnectivityTester
from github_ssh_wizard.connectivity import classify_response
from github_ssh_wizard.session import SessionCache
import pytest


GREETING = "Hi octocat! You've successfully authenticated, but GitHub does not provide shell access."


@pytest.fixture
def tester(wizard_config):
    return ConnectivityTester(wizard_config, SSHAgentManager(wizard_config))


@pytest.mark.parametrize(
    "text, status",
    [
        (GREETING, AuthStatus.AUTHENTICATED),
        ("You've successfully authenticated, but GitHub does not provide shell access.", AuthStatus.AUTHENTICATED),
        ("git@github.com: Permission denied (publickey).", AuthStatus.DENIED),
        ("ssh: Could not resolve hostname github.com: Name or service not known", AuthStatus.UNKNOWN),
        ("", AuthStatus.UNKNOWN),
        (None, AuthStatus.UNKNOWN),
    ],
)
def test_classify_response(text, status):
    assert classify_response(text) is status


class TestConnectivityTester:
    """Test the ssh handshake wrapper."""

    def test_authenticated(self, tester, commands, fake_agent):
        commands.on(["ssh"], commands.result(returncode=1, stderr=GREETING + "\n"))

        result = tester.test()

        assert result.ok
        assert result.status is AuthStatus.AUTHENTICATED
        assert result.username == "octocat"
        assert result.output == GREETING
        assert commands.matching(["ssh"]) == [
            ["ssh", "-T", "-o", "StrictHostKeyChecking=accept-new", "git@github.com"]
        ]

    def test_denied(self, tester, commands, fake_agent):
        commands.on(["ssh"], commands.result(returncode=255, stderr="git@github.com: Permission denied (publickey).\n"))

        result = tester.test()

        assert not result.ok
        assert result.status is AuthStatus.DENIED
        assert result.username is None

    def test_verbose_and_alias_host(self, tester, commands, fake_agent):
        commands.on(["ssh"], commands.result(returncode=1, stderr="debug1: Reading configuration data\n" + GREETING))

        result = tester.test(host="github-id_work", verbose=True)

        assert result.ok
        assert commands.matching(["ssh"])[0][1] == "-vT"
        assert commands.matching(["ssh"])[0][-1] == "git@github-id_work"

    def test_merges_stdout_and_stderr(self, tester, commands, fake_agent):
        commands.on(["ssh"], commands.result(returncode=1, stdout="banner\n", stderr="  \n"))

        assert tester.test().output == "banner"

    def test_ssh_not_available(self, tester, commands, fake_agent):
        commands.on(["ssh"], None)

        result = tester.test()

        assert result.status is AuthStatus.UNKNOWN
        assert result.output == ""

    def test_session_key_is_loaded(self, tester, wizard_config, commands, fake_agent, make_key):
        key_path = make_key("id_work")
        SessionCache(wizard_config.session_file).write(key_path)
        commands.on(["ssh"], commands.result(returncode=1, stderr=GREETING))

        tester.test()

        assert fake_agent.loaded == [key_path]
        ssh_add_index = commands.calls.index(["ssh-add", key_path])
        ssh_index = commands.calls.index(commands.matching(["ssh"])[0])
        assert ssh_add_index < ssh_index

    def test_stale_session_key_is_ignored(self, tester, wizard_config, commands, fake_agent, ssh_dir):
        SessionCache(wizard_config.session_file).write(str(ssh_dir / "id_deleted"))
        commands.on(["ssh"], commands.result(returncode=255, stderr="Permission denied (publickey)."))

        assert tester.test().status is AuthStatus.DENIED
        assert fake_agent.loaded == []

    def test_agent_started_when_missing(self, tester, wizard_config, commands, fake_agent):
        del wizard_config.env["SSH_AUTH_SOCK"]
        fake_agent.running = False
        commands.on(["ssh"], commands.result(returncode=1, stderr=GREETING))

        tester.test()

        assert fake_agent.started == 1
        assert commands.kwargs[-1]["env"]["SSH_AUTH_SOCK"] == "/tmp/ssh-XXXX/agent.4242"
