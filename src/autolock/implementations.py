"""
Real implementations of protocol interfaces.

These are production implementations that use libtmux to read a tmux
session and switch its key table, and ps to see what a pane runs.
"""

import os
import subprocess
from typing import List, Optional, Sequence

import libtmux
from libtmux.exc import LibTmuxException
from libtmux._internal.query_list import ObjectDoesNotExist

from .logging_config import get_logger
from .modes import MODE_LOCKED, MODE_NORMAL
from .protocols import TmuxSessionInterface
from .watcher_core import PANE_FORMAT, parse_foreground_command

logger = get_logger("tmux")


def _make_server(socket_name: Optional[str] = None) -> libtmux.Server:
    # Support AUTOLOCK_TMUX_SOCKET env var for testing
    socket_name = socket_name or os.environ.get("AUTOLOCK_TMUX_SOCKET")
    if socket_name:
        return libtmux.Server(socket_name=socket_name)
    return libtmux.Server()


def detect_current_session(socket_name: Optional[str] = None) -> Optional[str]:
    """Name of the tmux session this process runs in, from $TMUX_PANE."""
    pane = os.environ.get("TMUX_PANE")
    if not pane:
        return None
    try:
        result = _make_server(socket_name).cmd("display-message", "-p", "-t", pane, "#{session_name}")
    except LibTmuxException:
        return None
    if result.returncode != 0 or not result.stdout:
        return None
    return result.stdout[0].strip() or None


class LibtmuxSession:
    """Production implementation of TmuxSessionInterface using libtmux."""

    def __init__(self, session_name: str, socket_name: Optional[str] = None):
        self.session_name = session_name
        self._socket_name = socket_name
        self._server: Optional[libtmux.Server] = None
        self._session: Optional[libtmux.Session] = None

    @property
    def server(self) -> libtmux.Server:
        """Lazy-load the tmux server connection."""
        if self._server is None:
            self._server = _make_server(self._socket_name)
        return self._server

    def _get_session(self) -> Optional[libtmux.Session]:
        if self._session is not None:
            return self._session
        try:
            self._session = self.server.sessions.get(session_name=self.session_name)
        except (LibTmuxException, ObjectDoesNotExist):
            return None
        return self._session

    def _cmd(self, *args: str) -> Optional[List[str]]:
        """Run a tmux command against the session, returning stdout lines."""
        sess = self._get_session()
        if sess is None:
            return None
        try:
            result = sess.cmd(*args)
        except LibTmuxException as e:
            logger.debug(f"tmux {args[0]} failed: {e}")
            self._session = None
            return None
        if result.stderr:
            logger.debug(f"tmux {args[0]}: {' '.join(result.stderr)}")
            # The session may have been killed and recreated under a new id
            self._session = None
            return None
        return result.stdout

    def has_session(self) -> bool:
        return self._get_session() is not None

    def list_pane_rows(self) -> Optional[list]:
        return self._cmd("list-panes", "-s", "-F", PANE_FORMAT)

    def get_key_table(self) -> Optional[str]:
        lines = self._cmd("show-options", "-qv", "key-table")
        if lines is None:
            return None
        if lines and lines[0].strip():
            return lines[0].strip()
        # Not set on the session: fall back to the global value
        try:
            result = self.server.cmd("show-options", "-gqv", "key-table")
        except LibTmuxException:
            return None
        if result.stdout and result.stdout[0].strip():
            return result.stdout[0].strip()
        return None

    def set_key_table(self, table: str) -> bool:
        return self._cmd("set-option", "key-table", table) is not None


class RealTmuxHost:
    """Production implementation of HostInterface on top of a tmux session.

    Locked and normal mode are the session's key-table option set to the
    configured locked and normal tables. tmux has no permission model or
    plugin pane, so those requests are accepted and logged.
    """

    def __init__(
        self,
        tmux: TmuxSessionInterface,
        locked_table: str = "locked",
        normal_table: str = "root",
    ):
        self.tmux = tmux
        self.locked_table = locked_table
        self.normal_table = normal_table

    def request_permission(self, permissions: Sequence[str]) -> None:
        logger.debug(f"Permissions requested: {', '.join(permissions)}")

    def subscribe(self, kinds: Sequence[str]) -> None:
        logger.debug(f"Subscribed to: {', '.join(kinds)}")

    def switch_to_input_mode(self, mode: str) -> None:
        if mode == MODE_LOCKED:
            table = self.locked_table
        elif mode == MODE_NORMAL:
            table = self.normal_table
        else:
            logger.warning(f"Cannot switch to unmanaged mode {mode!r}")
            return

        if self.tmux.set_key_table(table):
            logger.info(f"Switched to {mode} (key-table {table})")
        else:
            logger.warning(f"Failed to switch to {mode} (key-table {table})")

    def hide_self(self) -> None:
        logger.debug("Nothing to hide: tmux host has no plugin pane")


class PsProcessTable:
    """Production implementation of ProcessTableInterface using ps."""

    def __init__(self, timeout: float = 2.0):
        self.timeout = timeout

    def foreground_command(self, tty: str) -> Optional[str]:
        device = tty[len("/dev/"):] if tty.startswith("/dev/") else tty
        try:
            result = subprocess.run(
                ["ps", "-t", device, "-o", "pid=,tpgid=,args="],
                capture_output=True, text=True, timeout=self.timeout,
            )
        except (subprocess.SubprocessError, OSError) as e:
            logger.debug(f"ps failed for {tty}: {e}")
            return None
        if result.returncode != 0:
            return None
        return parse_foreground_command(result.stdout.splitlines())
