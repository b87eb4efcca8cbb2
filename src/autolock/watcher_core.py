"""
Pure business logic for the tmux watcher.

These functions contain no I/O and are fully unit-testable. They turn raw
tmux list-panes output into snapshots, and the difference between two
snapshots into the ordered notifications a host would have delivered.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .modes import MODE_LOCKED, MODE_NORMAL
from .notifications import (
    PROGRAM_UPDATE_CHANNEL,
    CustomMessage,
    ModeUpdate,
    Notification,
    PaneClosed,
    PaneId,
    PaneInfo,
    PaneManifest,
    PaneUpdate,
    TabInfo,
    TabUpdate,
)

FIELD_SEPARATOR = "\t"

# Format string handed to `tmux list-panes -s -F`
PANE_FORMAT = FIELD_SEPARATOR.join([
    "#{window_index}",
    "#{window_active}",
    "#{window_name}",
    "#{pane_id}",
    "#{pane_tty}",
    "#{pane_active}",
    "#{pane_in_mode}",
    "#{pane_mode}",
    "#{pane_current_command}",
    "#{pane_start_command}",
])
PANE_FORMAT_FIELDS = PANE_FORMAT.count(FIELD_SEPARATOR) + 1


@dataclass(frozen=True)
class PaneRow:
    """One parsed line of list-panes output."""
    window_index: int
    window_active: bool
    window_name: str
    pane_number: int
    tty: str
    pane_active: bool
    pane_mode: Optional[str]  # set when the pane is in copy/view mode
    command: Optional[str]


@dataclass
class PollSnapshot:
    """Everything the watcher learns about a tmux session in one poll."""
    input_mode: str
    active_tab: Optional[int]
    tabs: List[TabInfo] = field(default_factory=list)
    manifest: PaneManifest = field(default_factory=dict)

    def pane_ids(self) -> List[PaneId]:
        return [pane.pane_id for panes in self.manifest.values() for pane in panes]

    def focused_pane(self) -> Optional[PaneInfo]:
        if self.active_tab is None:
            return None
        for pane in self.manifest.get(self.active_tab, []):
            if pane.is_focused:
                return pane
        return None


def parse_pane_number(pane_id: str) -> Optional[int]:
    """Parse a tmux pane id like "%12" into 12."""
    try:
        return int(pane_id.lstrip("%"))
    except ValueError:
        return None


def parse_pane_row(line: str) -> Optional[PaneRow]:
    """Parse one list-panes line produced with PANE_FORMAT.

    Pure function - no side effects, fully testable.

    Returns:
        PaneRow, or None if the line is malformed
    """
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) != PANE_FORMAT_FIELDS:
        return None
    (window_index, window_active, window_name, pane_id, tty, pane_active,
     pane_in_mode, pane_mode, current_command, start_command) = parts

    pane_number = parse_pane_number(pane_id)
    try:
        window_number = int(window_index)
    except ValueError:
        return None
    if pane_number is None:
        return None

    return PaneRow(
        window_index=window_number,
        window_active=window_active == "1",
        window_name=window_name,
        pane_number=pane_number,
        tty=tty,
        pane_active=pane_active == "1",
        pane_mode=(pane_mode or "copy-mode") if pane_in_mode == "1" else None,
        command=current_command.strip() or start_command.strip() or None,
    )


def resolve_input_mode(
    key_table: Optional[str],
    pane_mode: Optional[str],
    locked_table: str,
    normal_table: str,
) -> str:
    """Map tmux state to an input mode.

    Pure function - no side effects, fully testable.

    A pane in copy/view mode reports that pane mode. Otherwise the session's
    key table decides: the locked table is locked, the normal table is
    normal, and any other table is reported under its own name.
    """
    if pane_mode:
        return pane_mode
    table = key_table or normal_table
    if table == locked_table:
        return MODE_LOCKED
    if table == normal_table:
        return MODE_NORMAL
    return table


def find_active_pane(lines: List[str]) -> Optional[PaneRow]:
    """Get the row of the focused pane in the active window, if any."""
    for line in lines:
        row = parse_pane_row(line)
        if row is not None and row.window_active and row.pane_active:
            return row
    return None


def parse_foreground_command(lines: List[str]) -> Optional[str]:
    """Pick the foreground command line out of `ps -o pid=,tpgid=,args=` output.

    Pure function - no side effects, fully testable.

    The foreground job is the process group leader whose pid equals the
    tty's foreground process group id, the same process tmux names in
    pane_current_command.

    Returns:
        Full command line, or None if no process leads the foreground group
    """
    for line in lines:
        parts = line.split(None, 2)
        if len(parts) < 3:
            continue
        pid, tpgid, args = parts
        if pid == tpgid:
            return args.strip()
    return None


def build_snapshot(
    lines: List[str],
    key_table: Optional[str],
    locked_table: str,
    normal_table: str,
    command_lines: Optional[Mapping[str, str]] = None,
) -> PollSnapshot:
    """Build a PollSnapshot from list-panes output and the session key table.

    Pure function - no side effects, fully testable.

    Windows become tabs (keyed by window index) and tmux panes become
    terminal panes; tmux has no plugin panes. Malformed lines are skipped.

    tmux only knows the name of the program in a pane. command_lines maps
    pane ttys to full command lines where the caller resolved them; those
    replace the bare name.
    """
    command_lines = command_lines or {}
    manifest: Dict[int, List[PaneInfo]] = {}
    tab_names: Dict[int, str] = {}
    active_tab: Optional[int] = None
    active_pane_mode: Optional[str] = None

    for line in lines:
        row = parse_pane_row(line)
        if row is None:
            continue
        tab_names.setdefault(row.window_index, row.window_name)
        manifest.setdefault(row.window_index, []).append(PaneInfo(
            id=row.pane_number,
            is_focused=row.pane_active,
            is_plugin=False,
            command=command_lines.get(row.tty) or row.command,
        ))
        if row.window_active:
            active_tab = row.window_index
            if row.pane_active:
                active_pane_mode = row.pane_mode

    tabs = [
        TabInfo(position=index, active=index == active_tab, name=tab_names[index])
        for index in sorted(tab_names)
    ]

    return PollSnapshot(
        input_mode=resolve_input_mode(key_table, active_pane_mode, locked_table, normal_table),
        active_tab=active_tab,
        tabs=tabs,
        manifest=manifest,
    )


def derive_notifications(
    previous: Optional[PollSnapshot],
    current: PollSnapshot,
) -> List[Notification]:
    """Work out which notifications the change between two polls amounts to.

    Pure function - no side effects, fully testable.

    The first poll reports mode, tab and snapshot. After that the order is
    closed panes, mode change, pane snapshot, tab activation, and finally a
    program update when the focused pane kept focus but is now
    running a different command.

    Args:
        previous: Snapshot from the last poll (None on the first poll)
        current: Snapshot from this poll

    Returns:
        Notifications to feed to the plugin, in order
    """
    if previous is None:
        return [
            ModeUpdate(current.input_mode),
            TabUpdate(current.tabs),
            PaneUpdate(current.manifest),
        ]

    notifications: List[Notification] = []

    current_ids = set(current.pane_ids())
    for pane in previous.pane_ids():
        if pane not in current_ids:
            notifications.append(PaneClosed(pane))

    if current.input_mode != previous.input_mode:
        notifications.append(ModeUpdate(current.input_mode))

    # The new snapshot goes first so a tab switch resolves focus against it
    if current.manifest != previous.manifest:
        notifications.append(PaneUpdate(current.manifest))

    if current.active_tab != previous.active_tab:
        notifications.append(TabUpdate(current.tabs))

    before = previous.focused_pane()
    after = current.focused_pane()
    if (
        before is not None
        and after is not None
        and before.pane_id == after.pane_id
        and after.command
        and before.command != after.command
    ):
        notifications.append(CustomMessage(PROGRAM_UPDATE_CHANNEL, after.command))

    return notifications
