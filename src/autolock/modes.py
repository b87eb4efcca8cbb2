"""
Input mode constants and mappings for Autolock.

Centralizes the mode values the reconciler acts on, plus the display
mappings used by the CLI.
"""


# =============================================================================
# Input Mode Values
# =============================================================================

MODE_NORMAL = "normal"   # Multiplexer navigation/command mode
MODE_LOCKED = "locked"   # Keystrokes pass straight through to the program

# Modes autolock switches between. Anything else the host reports
# (copy-mode, resize, a custom key table...) is a third-party mode.
CONTROLLED_MODES = (MODE_NORMAL, MODE_LOCKED)


def is_controlled_mode(mode: str) -> bool:
    """Check if a mode is one autolock manages (normal or locked)."""
    return mode in CONTROLLED_MODES


# =============================================================================
# Mode to Display Mappings
# =============================================================================

MODE_COLORS = {
    MODE_NORMAL: "green",
    MODE_LOCKED: "red",
}

MODE_SYMBOLS = {
    MODE_NORMAL: "●",
    MODE_LOCKED: "🔒",
}


def get_mode_color(mode: str) -> str:
    """Get rich color name for an input mode."""
    return MODE_COLORS.get(mode, "yellow")


def get_mode_symbol(mode: str) -> str:
    """Get display symbol for an input mode."""
    return MODE_SYMBOLS.get(mode, "◆")
