"""
Program classification: command line -> program name -> default mode.

These functions contain no I/O and are fully unit-testable.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from .modes import MODE_LOCKED, MODE_NORMAL


# Wrappers that run another program with elevated privileges
SUPERUSER_WRAPPERS = frozenset({"sudo", "doas"})


def parse_program_list(value: Optional[str]) -> FrozenSet[str]:
    """Parse a comma-separated program list into a set of names.

    Pure function - no side effects, fully testable.

    Args:
        value: String like "vim, nvim,hx" (None or empty yields an empty set)

    Returns:
        Frozenset of trimmed, non-empty program names
    """
    if not value:
        return frozenset()
    return frozenset(name.strip() for name in value.split(",") if name.strip())


def _program_from_token(token: str) -> str:
    """Strip any path prefix: /usr/bin/vim -> vim."""
    return token.rsplit("/", 1)[-1] or token


def classify(cmdline: Optional[str], default_shell: str) -> str:
    """Resolve a command line to the name of the program it runs.

    Pure function - no side effects, fully testable.

    Takes the first whitespace-separated token and strips its path. When
    that token is a superuser wrapper (sudo, doas) the following token is
    used instead, so "sudo vim /etc/hosts" classifies as "vim".

    Args:
        cmdline: Raw command line, may be None or empty
        default_shell: Program name returned for empty command lines

    Returns:
        Program name (never empty)
    """
    tokens = (cmdline or "").split()
    if not tokens:
        return default_shell

    program = _program_from_token(tokens[0])
    if program in SUPERUSER_WRAPPERS and len(tokens) > 1:
        program = _program_from_token(tokens[1])
    return program


def default_mode(program: str, locked_programs: Iterable[str]) -> str:
    """Get the mode a program should start in: locked if listed, else normal."""
    return MODE_LOCKED if program in locked_programs else MODE_NORMAL


@dataclass(frozen=True)
class ProgramClassifier:
    """Classifier bound to a fixed locked-program set and default shell."""

    locked_programs: FrozenSet[str] = field(default_factory=frozenset)
    default_shell: str = "sh"

    def classify(self, cmdline: Optional[str]) -> str:
        return classify(cmdline, self.default_shell)

    def default_mode(self, program: str) -> str:
        return default_mode(program, self.locked_programs)

    def mode_for(self, cmdline: Optional[str]) -> str:
        """Classify a command line and return its default mode in one step."""
        return self.default_mode(self.classify(cmdline))
