"""
Mode reconciler: the state machine that keeps each pane in its input mode.

The reconciler owns every piece of mutable state (the registry, the focus
tracker and the last observed global mode) and is driven exclusively
through handle(), one notification at a time. Each notification issues at
most one switch request to the host.

Rules, in short:

- Focusing a pane switches to the mode remembered for it. A pane is
  classified from its command line the first time it is focused.
- A switch between normal and locked while a pane is focused is treated
  as the user's choice for that pane and remembered.
- Returning to normal from a third-party mode (copy-mode, resize...) is
  overridden with the pane's remembered mode.
- Nothing is switched while a third-party mode is active; focus is still
  tracked so the right mode applies once control returns.
"""

from typing import Callable, Dict, Optional

from .classifier import ProgramClassifier
from .focus_tracker import FocusTracker
from .logging_config import get_structured_logger
from .modes import MODE_LOCKED, MODE_NORMAL, is_controlled_mode
from .notifications import (
    KIND_CUSTOM_MESSAGE,
    KIND_MODE_UPDATE,
    KIND_PANE_CLOSED,
    KIND_PANE_UPDATE,
    KIND_TAB_UPDATE,
    PROGRAM_UPDATE_CHANNEL,
    CustomMessage,
    ModeUpdate,
    Notification,
    PaneClosed,
    PaneManifest,
    PaneUpdate,
    TabUpdate,
)
from .protocols import HostInterface
from .registry import PaneModeRegistry

logger = get_structured_logger("reconciler")


class ModeReconciler:
    """Consumes host notifications and issues input mode switches."""

    def __init__(
        self,
        host: HostInterface,
        classifier: ProgramClassifier,
        registry: Optional[PaneModeRegistry] = None,
        focus: Optional[FocusTracker] = None,
        input_mode: str = MODE_NORMAL,
    ):
        self.host = host
        self.classifier = classifier
        self.registry = registry if registry is not None else PaneModeRegistry()
        self.focus = focus if focus is not None else FocusTracker()
        self.input_mode = input_mode
        self.switch_count = 0

        self._handlers: Dict[str, Callable[..., Optional[str]]] = {
            KIND_MODE_UPDATE: self._on_mode_update,
            KIND_TAB_UPDATE: self._on_tab_update,
            KIND_PANE_UPDATE: self._on_pane_update,
            KIND_PANE_CLOSED: self._on_pane_closed,
            KIND_CUSTOM_MESSAGE: self._on_custom_message,
        }

    def handle(self, notification: Notification) -> Optional[str]:
        """Process one notification to completion.

        Returns:
            The mode a switch was requested to, or None if nothing was issued
        """
        handler = self._handlers.get(notification.kind)
        if handler is None:
            logger.debug("Ignoring notification", kind=notification.kind)
            return None
        return handler(notification)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _on_mode_update(self, notification: ModeUpdate) -> Optional[str]:
        new = notification.mode
        old = self.input_mode
        pane = self.focus.focused_pane
        issued = None

        if pane is not None:
            if new == MODE_LOCKED or (new == MODE_NORMAL and is_controlled_mode(old)):
                # The user (or our own switch) picked this mode for the pane
                self.registry.set(pane, new)
            elif new == MODE_NORMAL:
                # Back from a third-party mode: restore the pane's mode
                remembered = self.registry.get(pane)
                if remembered is not None and remembered != MODE_NORMAL:
                    logger.debug("Overriding return to normal", pane=pane, old=old, target=remembered)
                    issued = self._switch(remembered)

        logger.debug("Mode update", old=old, new=new, pane=pane)
        self.input_mode = new
        return issued

    def _on_tab_update(self, notification: TabUpdate) -> Optional[str]:
        position = notification.active_position()
        if position is None:
            return None
        if not self.focus.set_active_tab(position):
            return None

        logger.debug("Active tab changed", position=position)
        if self.focus.last_snapshot is None:
            return None
        return self._reconcile_focus(self.focus.last_snapshot)

    def _on_pane_update(self, notification: PaneUpdate) -> Optional[str]:
        self.focus.store_snapshot(notification.manifest)
        return self._reconcile_focus(notification.manifest)

    def _on_pane_closed(self, notification: PaneClosed) -> Optional[str]:
        self.registry.remove(notification.pane)
        self.focus.drop_from_snapshot(notification.pane)
        if self.focus.clear_focus_if(notification.pane):
            logger.debug("Focused pane closed", pane=notification.pane)
        return None

    def _on_custom_message(self, notification: CustomMessage) -> Optional[str]:
        if notification.channel != PROGRAM_UPDATE_CHANNEL:
            logger.debug("Ignoring message", channel=notification.channel)
            return None
        return self.on_program_update(notification.payload)

    def on_program_update(self, cmdline: str) -> Optional[str]:
        """Switch straight to a newly started program's default mode.

        Used when the caller knows a program just started in the focused
        pane before the next snapshot would reveal it.
        """
        target = self.classifier.mode_for(cmdline)
        logger.debug("Program update", cmdline=cmdline, target=target)
        return self._switch(target)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reconcile_focus(self, manifest: PaneManifest) -> Optional[str]:
        pane_info = self.focus.resolve(manifest)
        if pane_info is None:
            return None

        pane = pane_info.pane_id
        if pane not in self.registry:
            self.registry.register_if_absent(pane, self.classifier.mode_for(pane_info.command))

        if not self.focus.is_focus_change(pane):
            return None

        issued = None
        remembered = self.registry.get(pane)
        if is_controlled_mode(self.input_mode) and remembered is not None:
            issued = self._switch(remembered)
        else:
            logger.debug("Focus changed without switching", pane=pane, mode=self.input_mode)

        self.focus.set_focus(pane)
        return issued

    def _switch(self, mode: str) -> str:
        logger.debug("Requesting switch", mode=mode)
        self.host.switch_to_input_mode(mode)
        self.switch_count += 1
        return mode
