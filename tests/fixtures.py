"""
Test fixtures and factories for autolock unit tests.

Factory functions for pane snapshots, tmux list-panes rows and wired-up
reconcilers, so tests read as a sequence of host notifications.
"""

from typing import Dict, FrozenSet, Optional

from autolock.classifier import ProgramClassifier
from autolock.mocks import MockHost
from autolock.notifications import PaneInfo, PaneUpdate, TabInfo, TabUpdate
from autolock.reconciler import ModeReconciler
from autolock.watcher_core import FIELD_SEPARATOR


LOCKED_PROGRAMS: FrozenSet[str] = frozenset({"vim", "nvim", "hx"})


def create_reconciler(
    locked_programs: FrozenSet[str] = LOCKED_PROGRAMS,
    default_shell: str = "bash",
) -> ModeReconciler:
    """Create a reconciler wired to a MockHost (available as .host)."""
    classifier = ProgramClassifier(locked_programs=locked_programs, default_shell=default_shell)
    return ModeReconciler(MockHost(), classifier)


def terminal(pane_id: int, command: Optional[str] = None, focused: bool = False) -> PaneInfo:
    return PaneInfo(id=pane_id, is_focused=focused, is_plugin=False, command=command)


def plugin(pane_id: int, focused: bool = False) -> PaneInfo:
    return PaneInfo(id=pane_id, is_focused=focused, is_plugin=True, command=None)


def focus_update(
    focused: int,
    commands: Dict[int, Optional[str]],
    tab: int = 0,
) -> PaneUpdate:
    """Snapshot of one tab with the given panes and one of them focused.

    Usage:
        focus_update(1, {1: "vim notes.md", 2: None})
    """
    return PaneUpdate({
        tab: [terminal(pane_id, command, focused=pane_id == focused) for pane_id, command in commands.items()]
    })


def tab_update(active: int, count: int = 3) -> TabUpdate:
    return TabUpdate([TabInfo(position=i, active=i == active) for i in range(count)])


def pane_row(
    window_index: int,
    pane_id: int,
    command: str = "bash",
    window_active: bool = True,
    pane_active: bool = True,
    pane_mode: Optional[str] = None,
    window_name: str = "main",
    start_command: str = "",
    tty: Optional[str] = None,
) -> str:
    """Build one list-panes row in watcher_core.PANE_FORMAT.

    The tty defaults to /dev/pts/<pane_id>.
    """
    return FIELD_SEPARATOR.join([
        str(window_index),
        "1" if window_active else "0",
        window_name,
        f"%{pane_id}",
        tty if tty is not None else f"/dev/pts/{pane_id}",
        "1" if pane_active else "0",
        "1" if pane_mode else "0",
        pane_mode or "",
        command,
        start_command,
    ])
