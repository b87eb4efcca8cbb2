"""
Unit tests for watcher state publication.
"""

from datetime import datetime

from autolock.watcher_state import WatcherState


def make_state() -> WatcherState:
    return WatcherState(
        tmux_session="work",
        status="active",
        loop_count=12,
        started_at=datetime(2024, 5, 1, 9, 30),
        last_loop_time=datetime(2024, 5, 1, 9, 31, 5),
        input_mode="locked",
        active_tab=1,
        focused_pane="terminal:3",
        switch_count=4,
        pane_modes={"terminal:1": "normal", "terminal:3": "locked"},
    )


class TestWatcherState:
    """Tests for WatcherState serialization."""

    def test_defaults(self):
        state = WatcherState()

        assert state.status == "starting"
        assert state.pane_modes == {}
        assert state.to_dict()["started_at"] is None

    def test_from_dict_restores_everything(self):
        state = make_state()

        assert WatcherState.from_dict(state.to_dict()) == state

    def test_from_dict_tolerates_missing_fields(self):
        state = WatcherState.from_dict({"tmux_session": "work"})

        assert state.status == "unknown"
        assert state.loop_count == 0
        assert state.last_loop_time is None

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "sessions" / "work" / "watcher_state.json"

        make_state().save(path)

        assert WatcherState.load(path) == make_state()
        assert not path.with_suffix(".tmp").exists()

    def test_load_missing(self, tmp_path):
        assert WatcherState.load(tmp_path / "nope.json") is None

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "watcher_state.json"
        path.write_text("{not json")

        assert WatcherState.load(path) is None

    def test_load_bad_timestamp(self, tmp_path):
        path = tmp_path / "watcher_state.json"
        path.write_text('{"started_at": "yesterday"}')

        assert WatcherState.load(path) is None
