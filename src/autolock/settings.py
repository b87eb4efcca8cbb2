"""
Centralized settings and path handling for Autolock.

Every file autolock touches lives under ~/.autolock (override with
AUTOLOCK_DIR). Per-session runtime files (PID, state, message channel,
log) live in a session directory, which AUTOLOCK_STATE_DIR can relocate
for tests.
"""

import os
from dataclasses import dataclass
from pathlib import Path


def get_autolock_dir() -> Path:
    """Base directory for config and runtime files."""
    env_dir = os.environ.get("AUTOLOCK_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".autolock"


def get_state_dir() -> Path:
    """Directory holding one subdirectory per tmux session."""
    env_dir = os.environ.get("AUTOLOCK_STATE_DIR")
    if env_dir:
        return Path(env_dir)
    return get_autolock_dir() / "sessions"


def get_log_dir() -> Path:
    """Default directory for log files not tied to a session."""
    return get_autolock_dir() / "logs"


def get_session_dir(session: str) -> Path:
    return get_state_dir() / session


def get_watcher_pid_path(session: str) -> Path:
    return get_session_dir(session) / "watcher.pid"


def get_watcher_state_path(session: str) -> Path:
    return get_session_dir(session) / "watcher_state.json"


def get_watcher_log_path(session: str) -> Path:
    return get_session_dir(session) / "watcher.log"


def get_program_channel_path(session: str) -> Path:
    """File backing the out-of-band program update channel."""
    return get_session_dir(session) / "program_updates"


# Programs that start in locked mode when the config file doesn't say otherwise
DEFAULT_LOCKED_PROGRAMS = ("vim", "nvim", "vi", "hx", "kak", "emacs")


@dataclass(frozen=True)
class TmuxSettings:
    """Defaults for the tmux host."""
    locked_key_table: str = "locked"
    normal_key_table: str = "root"
    poll_interval: float = 0.5


TMUX = TmuxSettings()
