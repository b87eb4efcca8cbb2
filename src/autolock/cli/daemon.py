"""
Watcher commands: start, stop, status, logs.
"""

from typing import Annotated

import typer
from rich import print as rprint
from rich.table import Table

from ._shared import app, console, resolve_session, SessionOption


@app.command("start")
def start(
    session: SessionOption = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log every decision")
    ] = False,
):
    """Start the watcher for a tmux session (runs in the foreground).

    Run it in the background from tmux.conf with:
    run-shell -b "autolock start -s #{session_name}"
    """
    import logging

    from ..implementations import LibtmuxSession
    from ..logging_config import setup_daemon_logging
    from ..pid_utils import get_process_pid
    from ..settings import get_watcher_log_path, get_watcher_pid_path
    from ..watcher import TmuxWatcher

    session = resolve_session(session)

    pid = get_process_pid(get_watcher_pid_path(session))
    if pid is not None:
        rprint(f"[yellow]Watcher already running[/yellow] (PID {pid}) for session '{session}'")
        raise typer.Exit(1)

    if not LibtmuxSession(session).has_session():
        rprint(f"[red]Error:[/red] tmux session '{session}' not found")
        raise typer.Exit(1)

    setup_daemon_logging(
        get_watcher_log_path(session),
        level=logging.DEBUG if verbose else logging.INFO,
    )
    rprint(f"[dim]Watching tmux session '{session}'...[/dim]")
    TmuxWatcher(session).run()


@app.command("stop")
def stop(session: SessionOption = None):
    """Stop the running watcher."""
    from ..pid_utils import get_process_pid, stop_process
    from ..settings import get_watcher_pid_path

    session = resolve_session(session)
    pid_path = get_watcher_pid_path(session)

    pid = get_process_pid(pid_path)
    if pid is None:
        rprint(f"[dim]Watcher is not running for session '{session}'[/dim]")
        return

    if stop_process(pid_path):
        rprint(f"[green]✓[/green] Watcher stopped (was PID {pid}) for session '{session}'")
    else:
        rprint("[red]Failed to stop watcher[/red]")
        raise typer.Exit(1)


@app.command("status")
def status(session: SessionOption = None):
    """Show the watcher's current mode, focus and remembered pane modes."""
    from ..modes import get_mode_color, get_mode_symbol
    from ..pid_utils import get_process_pid
    from ..settings import get_watcher_pid_path, get_watcher_state_path
    from ..watcher_state import WatcherState

    session = resolve_session(session)
    pid = get_process_pid(get_watcher_pid_path(session))
    state = WatcherState.load(get_watcher_state_path(session))

    if pid is None:
        rprint(f"[dim]Watcher ({session}):[/dim] ○ stopped")
        if state and state.last_loop_time:
            rprint(f"  [dim]Last active: {state.last_loop_time:%Y-%m-%d %H:%M:%S}[/dim]")
        return

    rprint(f"[green]Watcher ({session}):[/green] ● running (PID {pid})")
    if state is None:
        return

    mode = state.input_mode or "?"
    color = get_mode_color(mode)
    rprint(f"  Status: {state.status}")
    rprint(f"  Mode: [{color}]{get_mode_symbol(mode)} {mode}[/{color}]")
    rprint(f"  Active tab: {state.active_tab if state.active_tab is not None else '-'}")
    rprint(f"  Focused pane: {state.focused_pane or '-'}")
    rprint(f"  Switches: {state.switch_count}")

    if state.pane_modes:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Pane")
        table.add_column("Mode")
        for pane, pane_mode in sorted(state.pane_modes.items()):
            pane_color = get_mode_color(pane_mode)
            marker = " ◀" if pane == state.focused_pane else ""
            table.add_row(pane + marker, f"[{pane_color}]{pane_mode}[/{pane_color}]")
        console.print(table)


@app.command("logs")
def logs(
    session: SessionOption = None,
    lines: Annotated[
        int, typer.Option("--lines", "-n", help="Number of lines to show")
    ] = 50,
):
    """Show the tail of the watcher log."""
    from ..settings import get_watcher_log_path

    session = resolve_session(session)
    log_file = get_watcher_log_path(session)

    if not log_file.exists():
        rprint(f"[red]Log file not found:[/red] {log_file}")
        rprint("[dim]The watcher may not have run yet.[/dim]")
        raise typer.Exit(1)

    for line in log_file.read_text().splitlines()[-lines:]:
        print(line)
