#!/usr/bin/env python3
"""
Tmux Watcher - drives AutolockPlugin from a tmux session.

tmux doesn't push events the way a plugin host does, so the watcher polls
the session, turns each change into the notification the plugin expects,
and feeds them to it in order:

- list-panes output becomes tab activation and pane snapshot updates, with
  the focused pane's full command line looked up through ps
- panes that disappear become pane-closed notifications
- the session's key-table (and copy-mode) becomes mode updates
- a focused pane starting a new command, and anything queued on the
  program update channel, become program updates

Pure translation logic lives in watcher_core.py for testability.
"""

import os
import signal
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import get_plugin_configuration, get_tmux_config
from .implementations import LibtmuxSession, PsProcessTable, RealTmuxHost
from .logging_config import get_logger, setup_daemon_logging
from .notifications import Notification, PermissionResult
from .pid_utils import acquire_daemon_lock, remove_pid_file
from .plugin import AutolockPlugin
from .program_channel import consume_program_updates
from .protocols import ProcessTableInterface, TmuxSessionInterface
from .settings import (
    get_program_channel_path,
    get_watcher_log_path,
    get_watcher_pid_path,
    get_watcher_state_path,
)
from .watcher_core import PollSnapshot, build_snapshot, derive_notifications, find_active_pane
from .watcher_state import WatcherState

logger = get_logger("watcher")


class TmuxWatcher:
    """Polling loop that keeps one tmux session's input mode in sync."""

    def __init__(
        self,
        tmux_session: str,
        tmux: Optional[TmuxSessionInterface] = None,
        processes: Optional[ProcessTableInterface] = None,
        configuration: Optional[Dict[str, str]] = None,
        tmux_config: Optional[dict] = None,
        state_path: Optional[Path] = None,
        pid_path: Optional[Path] = None,
        channel_path: Optional[Path] = None,
    ):
        self.tmux_session = tmux_session
        tmux_config = tmux_config if tmux_config is not None else get_tmux_config()

        self.tmux = tmux if tmux is not None else LibtmuxSession(tmux_session)
        self.processes = processes if processes is not None else PsProcessTable()
        self.host = RealTmuxHost(
            self.tmux,
            locked_table=tmux_config["locked_key_table"],
            normal_table=tmux_config["normal_key_table"],
        )
        self.plugin = AutolockPlugin(self.host)
        self.configuration = configuration if configuration is not None else get_plugin_configuration()
        self.poll_interval: float = tmux_config["poll_interval"]

        self.state_path = state_path or get_watcher_state_path(tmux_session)
        self.pid_path = pid_path or get_watcher_pid_path(tmux_session)
        self.channel_path = channel_path or get_program_channel_path(tmux_session)

        self.state = WatcherState(tmux_session=tmux_session)
        self.previous: Optional[PollSnapshot] = None
        self._last_command: Optional[Tuple[str, Optional[str], str]] = None
        self._shutdown = False

    def start(self) -> None:
        """Load the plugin; tmux needs no permission so it is granted at once."""
        self.plugin.load(self.configuration)
        self.plugin.update(PermissionResult(granted=True))
        self.state.started_at = datetime.now()

    def poll_once(self) -> List[Notification]:
        """Poll tmux once and deliver the resulting notifications.

        Returns:
            The notifications delivered, in order
        """
        self.state.loop_count += 1
        self.state.last_loop_time = datetime.now()

        rows = self.tmux.list_pane_rows()
        if rows is None:
            if self.state.status != "no_session":
                logger.warning(f"tmux session '{self.tmux_session}' not available")
            self.state.status = "no_session"
            # Start over with a full snapshot once the session is back
            self.previous = None
            return []

        key_table = self.tmux.get_key_table()
        if key_table is None:
            # Unknown mode: try again next poll rather than report a guess
            logger.debug("Could not read key-table, skipping poll")
            return []

        snapshot = build_snapshot(
            rows,
            key_table,
            locked_table=self.host.locked_table,
            normal_table=self.host.normal_table,
            command_lines=self._focused_command_line(rows),
        )
        notifications = derive_notifications(self.previous, snapshot)
        notifications.extend(consume_program_updates(self.tmux_session, self.channel_path))

        for notification in notifications:
            self.plugin.update(notification)

        self.previous = snapshot
        self.state.status = "active"
        self._update_state()
        return notifications

    def _focused_command_line(self, rows: List[str]) -> Dict[str, str]:
        """Full command line of the focused pane, keyed by its tty.

        A failed lookup reuses the last command line seen on that tty while
        tmux still reports the same program there.
        """
        row = find_active_pane(rows)
        if row is None or not row.tty:
            return {}
        command = self.processes.foreground_command(row.tty)
        if command:
            self._last_command = (row.tty, row.command, command)
        elif self._last_command and self._last_command[:2] == (row.tty, row.command):
            command = self._last_command[2]
        return {row.tty: command} if command else {}

    def _update_state(self) -> None:
        reconciler = self.plugin.reconciler
        if reconciler is None:
            return
        focused = reconciler.focus.focused_pane
        self.state.input_mode = reconciler.input_mode
        self.state.active_tab = reconciler.focus.active_tab
        self.state.focused_pane = str(focused) if focused is not None else None
        self.state.switch_count = reconciler.switch_count
        self.state.pane_modes = reconciler.registry.as_dict()

    def _publish_state(self) -> None:
        try:
            self.state.save(self.state_path)
        except OSError as e:
            logger.warning(f"Could not write state file: {e}")

    def stop(self) -> None:
        self._shutdown = True

    def run(self) -> None:
        """Main watcher loop."""
        # Atomically check if already running and acquire lock
        acquired, existing_pid = acquire_daemon_lock(self.pid_path)
        if not acquired:
            if existing_pid:
                logger.error(f"Watcher already running (PID {existing_pid})")
            else:
                logger.error("Could not acquire watcher lock (another watcher may be starting)")
            sys.exit(1)

        logger.info(f"Watcher starting: PID {os.getpid()}, tmux session '{self.tmux_session}'")

        def handle_shutdown(signum, frame):
            logger.info("Shutdown signal received")
            self._shutdown = True

        signal.signal(signal.SIGTERM, handle_shutdown)
        signal.signal(signal.SIGINT, handle_shutdown)

        try:
            self.start()
            while not self._shutdown:
                self.poll_once()
                self._publish_state()
                time.sleep(self.poll_interval)
        except Exception as e:
            logger.error(f"Watcher error: {e}")
            raise
        finally:
            logger.info("Watcher shutting down")
            self.state.status = "stopped"
            self._publish_state()
            remove_pid_file(self.pid_path)


def main() -> int:
    """Entrypoint for running the watcher directly."""
    import argparse

    from .implementations import detect_current_session

    parser = argparse.ArgumentParser(description="Autolock tmux watcher")
    parser.add_argument(
        "--session", "-s",
        default=None,
        help="tmux session name (default: the session this runs in)",
    )
    args = parser.parse_args()

    session = args.session or detect_current_session()
    if not session:
        print("Not inside tmux and no --session given", file=sys.stderr)
        return 1

    setup_daemon_logging(get_watcher_log_path(session))
    TmuxWatcher(session).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
