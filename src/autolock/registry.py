"""
Per-pane remembered input modes.
"""

from typing import Dict, Optional

from .logging_config import get_logger
from .notifications import PaneId

logger = get_logger("registry")


class PaneModeRegistry:
    """Mapping of pane -> the input mode that pane should run in.

    Entries are created lazily the first time a pane is focused, only
    overwritten by an explicit user choice, and dropped when the pane
    closes. A removed id that the host later reuses starts out unregistered.
    """

    def __init__(self):
        self._modes: Dict[PaneId, str] = {}

    def register_if_absent(self, pane: PaneId, mode: str) -> bool:
        """Insert a mode for a pane unless it already has one.

        Returns:
            True if a new entry was created, False if one already existed
        """
        if pane in self._modes:
            return False
        self._modes[pane] = mode
        logger.debug(f"Registered {pane} as {mode}")
        return True

    def get(self, pane: PaneId) -> Optional[str]:
        return self._modes.get(pane)

    def set(self, pane: PaneId, mode: str) -> None:
        """Overwrite the mode for a pane (used to remember a manual switch)."""
        previous = self._modes.get(pane)
        self._modes[pane] = mode
        if previous != mode:
            logger.debug(f"Remembered {mode} for {pane} (was {previous})")

    def remove(self, pane: PaneId) -> bool:
        """Forget a pane. Unknown panes are ignored.

        Returns:
            True if an entry was removed
        """
        if self._modes.pop(pane, None) is None:
            return False
        logger.debug(f"Forgot {pane}")
        return True

    def as_dict(self) -> Dict[str, str]:
        """Snapshot of the registry keyed by printable pane id."""
        return {str(pane): mode for pane, mode in self._modes.items()}

    def __contains__(self, pane: PaneId) -> bool:
        return pane in self._modes

    def __len__(self) -> int:
        return len(self._modes)
