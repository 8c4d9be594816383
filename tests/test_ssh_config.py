"""Tests for the host alias configurator."""

# Import built-in modules
import os
import stat

# Import third-party modules
from github_ssh_wizard.agent import SSHAgentManager
from github_ssh_wizard.exceptions import NoKeysFound
from github_ssh_wizard.exceptions import SSHConfigError
from github_ssh_wizard.ssh_config import HostAlias
from github_ssh_wizard.ssh_config import HostAliasConfigurator
from github_ssh_wizard.ssh_config import alias_name
from github_ssh_wizard.ssh_key_manager import SSHKeyManager
import pytest


@pytest.fixture
def configurator(wizard_config):
    agent = SSHAgentManager(wizard_config)
    return HostAliasConfigurator(wizard_config, SSHKeyManager(wizard_config, agent), agent)


def test_alias_name():
    assert alias_name("/home/octocat/.ssh/id_ed25519") == "github-id_ed25519"
    assert alias_name("id_work", prefix="gh-") == "gh-id_work"


def test_host_alias_render():
    entry = HostAlias("github-id_work", "/home/octocat/.ssh/id_work")
    assert entry.render() == (
        "\nHost github-id_work\n"
        "    HostName github.com\n"
        "    User git\n"
        "    IdentityFile /home/octocat/.ssh/id_work\n"
    )


class TestAutoConfigure:
    """Test alias creation for the whole key inventory."""

    def test_appends_block_per_key(self, configurator, wizard_config, fake_agent, make_key):
        ed_key = make_key("id_ed25519")
        work_key = make_key("id_work")

        added = configurator.auto_configure()

        assert [entry.alias_name for entry in added] == ["github-id_ed25519", "github-id_work"]
        content = wizard_config.ssh_config_file.read_text()
        assert content == (
            f"\nHost github-id_ed25519\n    HostName github.com\n    User git\n    IdentityFile {ed_key}\n"
            f"\nHost github-id_work\n    HostName github.com\n    User git\n    IdentityFile {work_key}\n"
        )
        assert fake_agent.loaded == [ed_key, work_key]

    def test_second_run_changes_nothing(self, configurator, wizard_config, fake_agent, make_key):
        make_key("id_ed25519")
        configurator.auto_configure()
        before = wizard_config.ssh_config_file.read_text()

        assert configurator.auto_configure() == []
        assert wizard_config.ssh_config_file.read_text() == before
        assert len(fake_agent.loaded) == 1

    def test_keeps_existing_config(self, configurator, wizard_config, fake_agent, make_key):
        wizard_config.ssh_config_file.write_text("Host example\n    HostName example.com\n")
        make_key("id_work")

        configurator.auto_configure()

        content = wizard_config.ssh_config_file.read_text()
        assert content.startswith("Host example\n    HostName example.com\n")
        assert configurator.list_aliases() == {"example", "github-id_work"}

    def test_existing_alias_is_not_duplicated(self, configurator, wizard_config, fake_agent, make_key):
        key_path = make_key("id_work")
        wizard_config.ssh_config_file.write_text("Host github-id_work\n    IdentityFile ~/.ssh/id_work\n")

        assert configurator.auto_configure() == []
        assert wizard_config.ssh_config_file.read_text().count("Host github-id_work") == 1
        # The key is still loaded even when its alias exists
        assert fake_agent.loaded == [key_path]

    def test_alias_match_is_whole_token(self, configurator, wizard_config, fake_agent, make_key):
        make_key("id_rsa")
        wizard_config.ssh_config_file.write_text("Host github-id_rsa2\n    HostName github.com\n")

        added = configurator.auto_configure()

        assert [entry.alias_name for entry in added] == ["github-id_rsa"]

    def test_skips_directories(self, configurator, wizard_config, ssh_dir, fake_agent, make_key):
        (ssh_dir / "id_backups").mkdir()
        key_path = make_key("id_work")

        added = configurator.auto_configure()

        assert [entry.identity_file for entry in added] == [key_path]
        assert "id_backups" not in wizard_config.ssh_config_file.read_text()

    def test_no_keys(self, configurator, wizard_config, fake_agent):
        with pytest.raises(NoKeysFound):
            configurator.auto_configure()
        # The config file is still created
        assert wizard_config.ssh_config_file.exists()

    def test_creates_missing_ssh_dir(self, configurator, wizard_config, ssh_dir, fake_agent):
        ssh_dir.rmdir()

        with pytest.raises(NoKeysFound):
            configurator.auto_configure()
        assert wizard_config.ssh_config_file.exists()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_new_config_is_private(self, configurator, wizard_config, fake_agent, make_key):
        make_key("id_work")

        configurator.auto_configure()

        mode = stat.S_IMODE(os.stat(wizard_config.ssh_config_file).st_mode)
        assert mode == 0o600

    def test_starts_agent_first(self, configurator, wizard_config, fake_agent, make_key):
        del wizard_config.env["SSH_AUTH_SOCK"]
        fake_agent.running = False
        make_key("id_work")

        configurator.auto_configure()

        assert fake_agent.started == 1


def test_list_aliases_without_config(configurator):
    assert configurator.list_aliases() == set()


def test_list_aliases_reads_every_pattern(configurator, wizard_config):
    wizard_config.ssh_config_file.write_text(
        "Host github-id_a github-id_b\n    User git\n\nhost lower\n  Hostname x\n"
    )
    assert configurator.list_aliases() == {"github-id_a", "github-id_b", "lower"}
    assert configurator.has_alias("github-id_a")
    assert not configurator.has_alias("github-id")


class TestConfigErrors:
    """Test I/O failures surfacing as wizard errors."""

    def test_config_path_is_directory(self, configurator, wizard_config, fake_agent, make_key):
        make_key("id_work")
        wizard_config.ssh_config_file.mkdir()

        with pytest.raises(SSHConfigError):
            configurator.auto_configure()

    def test_ssh_dir_is_a_file(self, wizard_config, temp_dir, fake_agent):
        blocker = os.path.join(temp_dir, "not-a-dir")
        with open(blocker, "w") as f:
            f.write("")
        wizard_config.ssh_config_file = os.path.join(blocker, "config")
        agent = SSHAgentManager(wizard_config)
        configurator = HostAliasConfigurator(wizard_config, SSHKeyManager(wizard_config, agent), agent)

        with pytest.raises(SSHConfigError):
            configurator.auto_configure()

    def test_unreadable_config_is_reported(self, configurator, wizard_config):
        wizard_config.ssh_config_file.mkdir()

        with pytest.raises(SSHConfigError, match="Cannot read"):
            configurator.list_aliases()
