"""
Unit tests for config module.
"""

import yaml

from autolock import config
from autolock.settings import DEFAULT_LOCKED_PROGRAMS


def write_config(text: str) -> None:
    config.CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    config.CONFIG_PATH.write_text(text)


class TestLoadConfig:
    """Test config loading functionality."""

    def test_returns_empty_dict_when_no_file(self):
        assert config.load_config() == {}

    def test_loads_valid_yaml(self):
        write_config("locked_mode_programs: [vim, hx]\ndefault_shell: zsh\n")

        result = config.load_config()

        assert result["locked_mode_programs"] == ["vim", "hx"]
        assert result["default_shell"] == "zsh"

    def test_returns_empty_dict_on_invalid_yaml(self):
        write_config("invalid: yaml: content: [")

        assert config.load_config() == {}

    def test_returns_empty_dict_when_yaml_is_not_dict(self):
        write_config("- vim\n- hx\n")

        assert config.load_config() == {}


class TestSaveConfig:

    def test_round_trips_through_yaml(self):
        config.save_config({"locked_mode_programs": ["vim"], "hide": True})

        assert yaml.safe_load(config.CONFIG_PATH.read_text()) == {
            "locked_mode_programs": ["vim"],
            "hide": True,
        }
        assert config.load_config()["hide"] is True


class TestGetPluginConfiguration:
    """Tests for flattening the config file into plugin configuration."""

    def test_defaults_without_file(self):
        result = config.get_plugin_configuration()

        assert result == {"locked_mode_programs": ",".join(DEFAULT_LOCKED_PROGRAMS)}

    def test_list_is_joined(self):
        write_config("locked_mode_programs:\n  - vim\n  - kak\n")

        assert config.get_plugin_configuration()["locked_mode_programs"] == "vim,kak"

    def test_string_passes_through(self):
        write_config("locked_mode_programs: 'vim, hx'\n")

        assert config.get_plugin_configuration()["locked_mode_programs"] == "vim, hx"

    def test_alias_key(self):
        write_config("programs_in_locked_mode: [emacs]\n")

        assert config.get_plugin_configuration()["locked_mode_programs"] == "emacs"

    def test_empty_list_locks_nothing(self):
        write_config("locked_mode_programs: []\n")

        assert config.get_plugin_configuration()["locked_mode_programs"] == ""

    def test_hide_and_shell(self):
        write_config("hide: true\ndefault_shell: fish\n")

        result = config.get_plugin_configuration()

        assert result["hide"] == "true"
        assert result["default_shell"] == "fish"

    def test_hide_false(self):
        write_config("hide: false\n")

        assert config.get_plugin_configuration()["hide"] == "false"


class TestGetTmuxConfig:
    """Tests for tmux host settings."""

    def test_defaults(self):
        assert config.get_tmux_config() == {
            "locked_key_table": "locked",
            "normal_key_table": "root",
            "poll_interval": 0.5,
        }

    def test_overrides(self):
        write_config("tmux:\n  locked_key_table: passthrough\n  poll_interval: 0.2\n")

        result = config.get_tmux_config()

        assert result["locked_key_table"] == "passthrough"
        assert result["normal_key_table"] == "root"
        assert result["poll_interval"] == 0.2

    def test_invalid_poll_interval_uses_default(self):
        write_config("tmux:\n  poll_interval: fast\n")

        assert config.get_tmux_config()["poll_interval"] == 0.5

    def test_non_positive_poll_interval_uses_default(self):
        write_config("tmux:\n  poll_interval: 0\n")

        assert config.get_tmux_config()["poll_interval"] == 0.5

    def test_tmux_section_not_a_dict(self):
        write_config("tmux: yes\n")

        assert config.get_tmux_config()["locked_key_table"] == "locked"
