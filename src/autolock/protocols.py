"""
Protocol definitions for external dependencies.

These interfaces allow dependency injection for testing, enabling us to
swap the real tmux-backed host with mock implementations in tests.
"""

from typing import Protocol, Optional, Sequence, runtime_checkable


@runtime_checkable
class HostInterface(Protocol):
    """Interface for requests sent to the multiplexer."""

    def request_permission(self, permissions: Sequence[str]) -> None:
        """Ask the host for permission to read and change application state."""
        ...

    def subscribe(self, kinds: Sequence[str]) -> None:
        """Subscribe to notification kinds (see notifications.SUBSCRIBED_KINDS)."""
        ...

    def switch_to_input_mode(self, mode: str) -> None:
        """Switch the global input mode.

        Fire-and-forget: the host is expected to report the change back as a
        ModeUpdate notification.
        """
        ...

    def hide_self(self) -> None:
        """Hide the plugin's own pane and make it unselectable."""
        ...


@runtime_checkable
class TmuxSessionInterface(Protocol):
    """Interface for the tmux queries and commands the tmux host needs."""

    def list_pane_rows(self) -> Optional[list]:
        """Return raw list-panes rows for the session, or None on failure."""
        ...

    def get_key_table(self) -> Optional[str]:
        """Return the session's key-table option, or None on failure."""
        ...

    def set_key_table(self, table: str) -> bool:
        """Set the session's key-table option."""
        ...


@runtime_checkable
class ProcessTableInterface(Protocol):
    """Interface for looking up what runs on a terminal (non-tmux)."""

    def foreground_command(self, tty: str) -> Optional[str]:
        """Return the full command line of the tty's foreground job.

        Args:
            tty: terminal device, e.g. "/dev/pts/3"

        Returns:
            Command line with arguments, or None if it can't be determined
        """
        ...
