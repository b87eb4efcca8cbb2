"""
Notification types delivered by the host.

Each notification is a small dataclass tagged with a ``kind`` string so the
reconciler can dispatch on it with a lookup table instead of isinstance
chains.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


# =============================================================================
# Notification kinds
# =============================================================================

KIND_PERMISSION_RESULT = "permission_result"
KIND_MODE_UPDATE = "mode_update"
KIND_TAB_UPDATE = "tab_update"
KIND_PANE_UPDATE = "pane_update"
KIND_PANE_CLOSED = "pane_closed"
KIND_CUSTOM_MESSAGE = "custom_message"

# Kinds the plugin subscribes to at startup
SUBSCRIBED_KINDS = (
    KIND_MODE_UPDATE,
    KIND_TAB_UPDATE,
    KIND_PANE_UPDATE,
    KIND_PANE_CLOSED,
    KIND_CUSTOM_MESSAGE,
)

# Named side channel carrying out-of-band program updates
PROGRAM_UPDATE_CHANNEL = "autolock"

# Permissions requested at startup
PERMISSION_READ_APPLICATION_STATE = "read_application_state"
PERMISSION_CHANGE_APPLICATION_STATE = "change_application_state"
REQUESTED_PERMISSIONS = (
    PERMISSION_READ_APPLICATION_STATE,
    PERMISSION_CHANGE_APPLICATION_STATE,
)


# =============================================================================
# Pane and tab descriptors
# =============================================================================

@dataclass(frozen=True)
class PaneId:
    """Identity of a pane. Terminal and plugin panes live in separate id spaces."""
    number: int
    is_plugin: bool = False

    def __str__(self) -> str:
        return f"plugin:{self.number}" if self.is_plugin else f"terminal:{self.number}"


@dataclass(frozen=True)
class PaneInfo:
    """One pane as reported in a snapshot."""
    id: int
    is_focused: bool = False
    is_plugin: bool = False
    command: Optional[str] = None  # invocation command line, if known

    @property
    def pane_id(self) -> PaneId:
        return PaneId(self.id, self.is_plugin)


@dataclass(frozen=True)
class TabInfo:
    position: int
    active: bool = False
    name: str = ""


# tab position -> panes in that tab, in host order
PaneManifest = Dict[int, List[PaneInfo]]


# =============================================================================
# Notifications
# =============================================================================

@dataclass(frozen=True)
class PermissionResult:
    granted: bool
    kind: str = field(default=KIND_PERMISSION_RESULT, init=False)


@dataclass(frozen=True)
class ModeUpdate:
    mode: str
    kind: str = field(default=KIND_MODE_UPDATE, init=False)


@dataclass(frozen=True)
class TabUpdate:
    tabs: List[TabInfo]
    kind: str = field(default=KIND_TAB_UPDATE, init=False)

    def active_position(self) -> Optional[int]:
        """Position of the tab flagged active, or None if no tab is."""
        for tab in self.tabs:
            if tab.active:
                return tab.position
        return None


@dataclass(frozen=True)
class PaneUpdate:
    manifest: PaneManifest
    kind: str = field(default=KIND_PANE_UPDATE, init=False)


@dataclass(frozen=True)
class PaneClosed:
    pane: PaneId
    kind: str = field(default=KIND_PANE_CLOSED, init=False)


@dataclass(frozen=True)
class CustomMessage:
    channel: str
    payload: str
    kind: str = field(default=KIND_CUSTOM_MESSAGE, init=False)


Notification = Union[
    PermissionResult,
    ModeUpdate,
    TabUpdate,
    PaneUpdate,
    PaneClosed,
    CustomMessage,
]
