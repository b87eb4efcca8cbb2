"""
Out-of-band program update channel.

Shell hooks (or anything else that knows a program is about to start) call
send_program_update(); the watcher drains the channel on every poll and
delivers each command line as a CustomMessage on PROGRAM_UPDATE_CHANNEL.

The channel is a per-session append-only file, one command line per line.
"""

import os
from pathlib import Path
from typing import List, Optional

from .notifications import PROGRAM_UPDATE_CHANNEL, CustomMessage
from .settings import get_program_channel_path


def send_program_update(session: str, cmdline: str, channel_path: Optional[Path] = None) -> None:
    """Queue a command line for the watcher of a tmux session."""
    path = channel_path or get_program_channel_path(session)
    path.parent.mkdir(parents=True, exist_ok=True)
    line = " ".join(cmdline.split())
    with open(path, "a") as f:
        f.write(line + "\n")


def consume_program_updates(session: str, channel_path: Optional[Path] = None) -> List[CustomMessage]:
    """Drain queued command lines, oldest first.

    The file is renamed before reading so lines appended while draining
    land in a fresh file and are picked up on the next poll.
    """
    path = channel_path or get_program_channel_path(session)
    draining = path.with_name(f"{path.name}.{os.getpid()}.draining")
    # Atomic: just try to rename, don't check exists() first (TOCTOU race)
    try:
        path.rename(draining)
    except FileNotFoundError:
        return []

    try:
        content = draining.read_text()
    finally:
        draining.unlink(missing_ok=True)

    return [
        CustomMessage(PROGRAM_UPDATE_CHANNEL, line)
        for line in content.splitlines()
        if line.strip()
    ]
