"""
Watcher state publication.

The watcher writes its current view (mode, focus, registry) to a JSON file
after every poll so `autolock status` can display it. The file is only
ever read for display; a restarted watcher always starts empty.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional


@dataclass
class WatcherState:
    """Snapshot of a running watcher for status display."""

    tmux_session: str = ""
    status: str = "starting"  # starting, active, no_session, stopped
    loop_count: int = 0
    started_at: Optional[datetime] = None
    last_loop_time: Optional[datetime] = None
    input_mode: Optional[str] = None
    active_tab: Optional[int] = None
    focused_pane: Optional[str] = None
    switch_count: int = 0
    pane_modes: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert state to dictionary for JSON serialization."""
        return {
            "tmux_session": self.tmux_session,
            "status": self.status,
            "loop_count": self.loop_count,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "last_loop_time": self.last_loop_time.isoformat() if self.last_loop_time else None,
            "input_mode": self.input_mode,
            "active_tab": self.active_tab,
            "focused_pane": self.focused_pane,
            "switch_count": self.switch_count,
            "pane_modes": dict(self.pane_modes),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WatcherState":
        """Create state from dictionary."""
        state = cls()
        state.tmux_session = data.get("tmux_session", "")
        state.status = data.get("status", "unknown")
        state.loop_count = data.get("loop_count", 0)
        state.input_mode = data.get("input_mode")
        state.active_tab = data.get("active_tab")
        state.focused_pane = data.get("focused_pane")
        state.switch_count = data.get("switch_count", 0)
        state.pane_modes = dict(data.get("pane_modes") or {})

        if data.get("started_at"):
            state.started_at = datetime.fromisoformat(data["started_at"])
        if data.get("last_loop_time"):
            state.last_loop_time = datetime.fromisoformat(data["last_loop_time"])

        return state

    def save(self, state_file: Path) -> None:
        """Write state atomically via a temp file."""
        state_file.parent.mkdir(parents=True, exist_ok=True)
        temp_path = state_file.with_suffix(".tmp")
        with open(temp_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        temp_path.replace(state_file)

    @classmethod
    def load(cls, state_file: Path) -> Optional["WatcherState"]:
        """Load state from file.

        Returns:
            WatcherState if the file exists and is valid, None otherwise
        """
        if not state_file.exists():
            return None

        try:
            with open(state_file) as f:
                data = json.load(f)
            return cls.from_dict(data)
        except (json.JSONDecodeError, KeyError, ValueError, TypeError, AttributeError, OSError):
            return None
