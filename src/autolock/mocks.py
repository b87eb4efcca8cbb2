"""
Mock implementations of protocol interfaces for testing.
"""

from typing import Dict, List, Optional, Sequence


class MockHost:
    """Mock implementation of HostInterface that records every request."""

    def __init__(self):
        self.switches: List[str] = []
        self.permission_requests: List[tuple] = []
        self.subscriptions: List[tuple] = []
        self.hide_requests = 0

    def request_permission(self, permissions: Sequence[str]) -> None:
        self.permission_requests.append(tuple(permissions))

    def subscribe(self, kinds: Sequence[str]) -> None:
        self.subscriptions.append(tuple(kinds))

    def switch_to_input_mode(self, mode: str) -> None:
        self.switches.append(mode)

    def hide_self(self) -> None:
        self.hide_requests += 1


class MockTmuxSession:
    """Mock implementation of TmuxSessionInterface backed by plain attributes."""

    def __init__(self, rows: Optional[List[str]] = None, key_table: Optional[str] = "root"):
        self.rows = rows
        self.key_table = key_table
        self.fail_set = False
        self.set_calls: List[str] = []

    def list_pane_rows(self) -> Optional[list]:
        return None if self.rows is None else list(self.rows)

    def get_key_table(self) -> Optional[str]:
        return self.key_table

    def set_key_table(self, table: str) -> bool:
        self.set_calls.append(table)
        if self.fail_set:
            return False
        self.key_table = table
        return True


class MockProcessTable:
    """Mock implementation of ProcessTableInterface keyed by tty."""

    def __init__(self, commands: Optional[Dict[str, str]] = None):
        self.commands: Dict[str, str] = dict(commands or {})
        self.lookups: List[str] = []

    def foreground_command(self, tty: str) -> Optional[str]:
        self.lookups.append(tty)
        return self.commands.get(tty)
