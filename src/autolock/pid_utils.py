"""
PID file helpers for the watcher daemon.
"""

import fcntl
import os
import signal
import time
from pathlib import Path
from typing import Optional, Tuple


def _read_pid(pid_file: Path) -> Optional[int]:
    try:
        return int(pid_file.read_text().strip())
    except (OSError, ValueError):
        return None


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
        return True
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but owned by someone else
        return True


def get_process_pid(pid_file: Path) -> Optional[int]:
    """Get the PID from a PID file if that process is alive."""
    if not pid_file.exists():
        return None
    pid = _read_pid(pid_file)
    if pid is None or not _pid_alive(pid):
        return None
    return pid


def write_pid_file(pid_file: Path, pid: Optional[int] = None) -> None:
    pid_file.parent.mkdir(parents=True, exist_ok=True)
    pid_file.write_text(str(pid if pid is not None else os.getpid()))


def remove_pid_file(pid_file: Path) -> None:
    try:
        pid_file.unlink()
    except FileNotFoundError:
        pass


def acquire_daemon_lock(pid_file: Path) -> Tuple[bool, Optional[int]]:
    """Atomically check for a running daemon and claim the PID file.

    Holds an exclusive flock on a sibling .lock file while checking, so two
    daemons starting at once can't both win. A stale PID file from a dead
    process is overwritten.

    Returns:
        (acquired, existing_pid) - existing_pid is set when another live
        daemon owns the PID file
    """
    pid_file.parent.mkdir(parents=True, exist_ok=True)
    lock_path = pid_file.with_suffix(".lock")

    with open(lock_path, "w") as lock_file:
        try:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return False, None
        try:
            existing = get_process_pid(pid_file)
            if existing is not None and existing != os.getpid():
                return False, existing
            write_pid_file(pid_file)
            return True, None
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)


def stop_process(pid_file: Path, timeout: float = 5.0) -> bool:
    """Stop the process in a PID file: SIGTERM, then SIGKILL after timeout.

    Returns:
        True if a process was signalled
    """
    pid = get_process_pid(pid_file)
    if pid is None:
        return False

    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        remove_pid_file(pid_file)
        return False

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not _pid_alive(pid):
            break
        time.sleep(0.1)
    else:
        try:
            os.kill(pid, signal.SIGKILL)
        except ProcessLookupError:
            pass

    remove_pid_file(pid_file)
    return True
