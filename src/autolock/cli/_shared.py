"""
Shared CLI state: Typer apps, console, options, and utilities.
"""

from typing import Annotated, Optional

import typer
from rich import print as rprint
from rich.console import Console

# Main app
app = typer.Typer(
    name="autolock",
    help="Lock tmux input for programs that need raw keystrokes",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Config subcommand group
config_app = typer.Typer(
    name="config",
    help="Manage configuration",
    no_args_is_help=False,
    invoke_without_command=True,
)
app.add_typer(config_app, name="config")

# Console for rich output
console = Console()

# Global session option
SessionOption = Annotated[
    Optional[str],
    typer.Option(
        "--session", "-s",
        help="tmux session name (default: the session this runs in)",
    ),
]


def resolve_session(session: Optional[str]) -> str:
    """Return the given session name, or the current tmux session.

    Exits with an error when neither is available.
    """
    if session:
        return session

    from ..implementations import detect_current_session

    detected = detect_current_session()
    if not detected:
        rprint("[red]Error:[/red] not inside tmux; pass --session")
        raise typer.Exit(1)
    return detected
