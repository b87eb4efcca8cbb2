"""
Unit tests for CLI using Typer.

These tests verify that the CLI correctly handles commands
using Typer's CliRunner.
"""

import os
import re
from datetime import datetime
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from autolock import config
from autolock.cli import app
from autolock.settings import (
    get_program_channel_path,
    get_watcher_log_path,
    get_watcher_pid_path,
    get_watcher_state_path,
)
from autolock.watcher_state import WatcherState


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return re.sub(r'\x1b\[[0-9;]*m', '', text)


runner = CliRunner()


@pytest.fixture
def outside_tmux(monkeypatch):
    monkeypatch.delenv("TMUX_PANE", raising=False)


class TestCLICommands:
    """Test top-level CLI"""

    def test_main_help(self):
        """Main help lists all commands"""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "Lock tmux input" in output
        for command in ("start", "stop", "status", "logs", "classify", "notify", "config"):
            assert command in output

    def test_session_required_outside_tmux(self, outside_tmux):
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 1
        assert "not inside tmux" in result.stdout


class TestClassifyCommand:
    """Test classify command"""

    def test_locked_program(self):
        result = runner.invoke(app, ["classify", "sudo vim /etc/hosts"])
        assert result.exit_code == 0
        assert "vim → locked" in strip_ansi(result.stdout)

    def test_normal_program(self):
        result = runner.invoke(app, ["classify", "/usr/bin/git log"])
        assert result.exit_code == 0
        assert "git → normal" in strip_ansi(result.stdout)

    def test_uses_config_file(self):
        config.save_config({"locked_mode_programs": ["htop"]})

        result = runner.invoke(app, ["classify", "vim"])

        assert "vim → normal" in strip_ansi(result.stdout)


class TestNotifyCommand:
    """Test notify command"""

    def test_queues_program_update(self):
        result = runner.invoke(app, ["notify", "nvim  notes.md", "--session", "work"])
        assert result.exit_code == 0
        assert get_program_channel_path("work").read_text() == "nvim notes.md\n"

    def test_requires_session(self, outside_tmux):
        result = runner.invoke(app, ["notify", "vim"])
        assert result.exit_code == 1


class TestWatcherCommands:
    """Test start/stop/status/logs"""

    def test_status_not_running(self):
        result = runner.invoke(app, ["status", "-s", "work"])
        assert result.exit_code == 0
        assert "stopped" in result.stdout

    def test_status_not_running_shows_last_activity(self):
        WatcherState(tmux_session="work", last_loop_time=datetime(2024, 5, 1, 9, 30)).save(
            get_watcher_state_path("work")
        )

        result = runner.invoke(app, ["status", "-s", "work"])

        assert "2024-05-01 09:30:00" in result.stdout

    def test_status_running(self):
        get_watcher_pid_path("work").parent.mkdir(parents=True, exist_ok=True)
        get_watcher_pid_path("work").write_text(str(os.getpid()))
        WatcherState(
            tmux_session="work",
            status="active",
            input_mode="locked",
            active_tab=0,
            focused_pane="terminal:2",
            switch_count=3,
            pane_modes={"terminal:1": "normal", "terminal:2": "locked"},
        ).save(get_watcher_state_path("work"))

        result = runner.invoke(app, ["status", "-s", "work"])

        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "running" in output
        assert "locked" in output
        assert "terminal:1" in output
        assert "Switches: 3" in output

    def test_stop_not_running(self):
        result = runner.invoke(app, ["stop", "-s", "work"])
        assert result.exit_code == 0
        assert "not running" in result.stdout

    def test_start_refuses_when_running(self):
        get_watcher_pid_path("work").parent.mkdir(parents=True, exist_ok=True)
        get_watcher_pid_path("work").write_text(str(os.getpid()))

        result = runner.invoke(app, ["start", "-s", "work"])

        assert result.exit_code == 1
        assert "already running" in result.stdout

    def test_start_requires_existing_session(self):
        with patch("autolock.implementations.LibtmuxSession.has_session", return_value=False):
            result = runner.invoke(app, ["start", "-s", "nope"])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_logs_missing(self):
        result = runner.invoke(app, ["logs", "-s", "work"])
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_logs_tail(self):
        log_file = get_watcher_log_path("work")
        log_file.parent.mkdir(parents=True, exist_ok=True)
        log_file.write_text("".join(f"line {i}\n" for i in range(10)))

        result = runner.invoke(app, ["logs", "-s", "work", "-n", "2"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["line 8", "line 9"]


class TestConfigCommands:
    """Test config init/show/path"""

    def test_path(self):
        result = runner.invoke(app, ["config", "path"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(config.CONFIG_PATH)

    def test_init_creates_file(self):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert config.CONFIG_PATH.exists()
        assert "locked_mode_programs" in config.CONFIG_PATH.read_text()

    def test_init_refuses_to_overwrite(self):
        config.save_config({"hide": True})

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert "hide: true" in config.CONFIG_PATH.read_text()

    def test_init_force(self):
        config.save_config({"hide": True})

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert "hide: true" not in config.CONFIG_PATH.read_text()

    def test_template_loads_as_empty_config(self):
        runner.invoke(app, ["config", "init"])

        assert config.load_config() == {}

    def test_show_defaults(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        output = strip_ansi(result.stdout)
        assert "using defaults" in output
        assert "locked_mode_programs: vim,nvim" in output
        assert "normal_key_table: root" in output

    def test_show_file_values(self):
        config.save_config({"locked_mode_programs": ["hx"], "default_shell": "fish"})

        result = runner.invoke(app, ["config", "show"])

        output = strip_ansi(result.stdout)
        assert "locked_mode_programs: hx" in output
        assert "default_shell: fish" in output
