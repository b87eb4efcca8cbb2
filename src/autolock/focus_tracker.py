"""
Focus tracking from pane snapshots and tab activation.
"""

from typing import Optional

from .notifications import PaneInfo, PaneManifest, PaneId


def find_focused_pane(manifest: PaneManifest, tab_position: int) -> Optional[PaneInfo]:
    """Find the focused terminal pane within one tab of a snapshot.

    Pure function - no side effects, fully testable.

    Args:
        manifest: Snapshot mapping tab position -> panes
        tab_position: Tab to look in

    Returns:
        The focused, non-plugin pane, or None if the tab is unknown or has none
    """
    for pane in manifest.get(tab_position, []):
        if pane.is_focused and not pane.is_plugin:
            return pane
    return None


class FocusTracker:
    """Tracks the active tab, the last snapshot and the focused pane.

    The tracker only stores state; deciding what a focus change means is
    left to the reconciler, which is the only caller that mutates it.
    """

    def __init__(self, active_tab: int = 0):
        self.active_tab: int = active_tab
        self.focused_pane: Optional[PaneId] = None
        self.last_snapshot: Optional[PaneManifest] = None

    def store_snapshot(self, manifest: PaneManifest) -> None:
        self.last_snapshot = manifest

    def set_active_tab(self, position: int) -> bool:
        """Record a new active tab.

        Returns:
            True if the position changed
        """
        if position == self.active_tab:
            return False
        self.active_tab = position
        return True

    def resolve(self, manifest: Optional[PaneManifest] = None) -> Optional[PaneInfo]:
        """Find the focused pane in the active tab of a snapshot.

        Uses the last stored snapshot when none is given.
        """
        if manifest is None:
            manifest = self.last_snapshot
        if manifest is None:
            return None
        return find_focused_pane(manifest, self.active_tab)

    def is_focus_change(self, pane: PaneId) -> bool:
        return pane != self.focused_pane

    def set_focus(self, pane: Optional[PaneId]) -> None:
        self.focused_pane = pane

    def clear_focus_if(self, pane: PaneId) -> bool:
        """Drop the focused pane if it is ``pane``.

        Returns:
            True if focus was cleared
        """
        if self.focused_pane == pane:
            self.focused_pane = None
            return True
        return False

    def drop_from_snapshot(self, pane: PaneId) -> None:
        """Remove a closed pane from the stored snapshot."""
        if self.last_snapshot is None:
            return
        self.last_snapshot = {
            tab: [info for info in panes if info.pane_id != pane]
            for tab, panes in self.last_snapshot.items()
        }
