"""
Plugin lifecycle: startup configuration, permission handling and dispatch.

AutolockPlugin is what a host drives. load() is called once with the
string key/value configuration; update() is called for every notification
and returns the mode a switch was requested to, if any.
"""

import os
from typing import Mapping, Optional

from .classifier import ProgramClassifier, parse_program_list
from .logging_config import get_logger
from .notifications import (
    KIND_PERMISSION_RESULT,
    REQUESTED_PERMISSIONS,
    SUBSCRIBED_KINDS,
    Notification,
)
from .protocols import HostInterface
from .reconciler import ModeReconciler

logger = get_logger("plugin")

# Configuration keys
CONFIG_LOCKED_PROGRAMS = "locked_mode_programs"
CONFIG_LOCKED_PROGRAMS_ALIAS = "programs_in_locked_mode"
CONFIG_HIDE = "hide"
CONFIG_DEFAULT_SHELL = "default_shell"


def parse_bool(value: Optional[str]) -> bool:
    """Parse a configuration boolean ("true", "yes", "1", "on")."""
    if value is None:
        return False
    return value.strip().lower() in ("true", "yes", "1", "on")


def default_shell_name() -> str:
    """Name of the user's login shell, from $SHELL (falls back to "sh")."""
    shell = os.environ.get("SHELL", "")
    return shell.rsplit("/", 1)[-1] or "sh"


class AutolockPlugin:
    """Host-facing shell around the mode reconciler."""

    def __init__(self, host: HostInterface):
        self.host = host
        self.initialized = False
        self.hide = False
        self._hidden = False
        self.reconciler: Optional[ModeReconciler] = None

    def load(self, configuration: Mapping[str, str]) -> None:
        """Apply configuration, then request permissions and subscriptions."""
        locked_value = configuration.get(CONFIG_LOCKED_PROGRAMS)
        if locked_value is None:
            locked_value = configuration.get(CONFIG_LOCKED_PROGRAMS_ALIAS)

        classifier = ProgramClassifier(
            locked_programs=parse_program_list(locked_value),
            default_shell=configuration.get(CONFIG_DEFAULT_SHELL) or default_shell_name(),
        )
        self.hide = parse_bool(configuration.get(CONFIG_HIDE))
        self.reconciler = ModeReconciler(self.host, classifier)

        logger.info(f"Locked mode programs: {', '.join(sorted(classifier.locked_programs)) or '(none)'}")
        logger.debug(f"Default shell: {classifier.default_shell}, hide: {self.hide}")

        self.host.request_permission(REQUESTED_PERMISSIONS)
        self.host.subscribe(SUBSCRIBED_KINDS)

    def update(self, notification: Notification) -> Optional[str]:
        """Handle one notification from the host."""
        if notification.kind == KIND_PERMISSION_RESULT:
            self._on_permission_result(notification.granted)
            return None
        if self.reconciler is None:
            logger.warning(f"Dropping {notification.kind} received before load()")
            return None
        return self.reconciler.handle(notification)

    def _on_permission_result(self, granted: bool) -> None:
        if not granted:
            logger.warning("Permission denied: input mode will not be managed")
            return
        self.initialized = True
        logger.info("Permission granted")
        if self.hide and not self._hidden:
            self.host.hide_self()
            self._hidden = True
