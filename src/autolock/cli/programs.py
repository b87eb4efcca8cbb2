"""
Program commands: classify, notify.
"""

from typing import Annotated

import typer
from rich import print as rprint

from ._shared import app, resolve_session, SessionOption


@app.command("classify")
def classify(
    cmdline: Annotated[str, typer.Argument(help="Command line to classify")],
):
    """Show which program a command line runs and the mode it starts in."""
    from ..classifier import ProgramClassifier, parse_program_list
    from ..config import get_plugin_configuration
    from ..logging_config import setup_cli_logging
    from ..modes import get_mode_color
    from ..plugin import CONFIG_DEFAULT_SHELL, CONFIG_LOCKED_PROGRAMS, default_shell_name

    setup_cli_logging()
    configuration = get_plugin_configuration()
    classifier = ProgramClassifier(
        locked_programs=parse_program_list(configuration.get(CONFIG_LOCKED_PROGRAMS)),
        default_shell=configuration.get(CONFIG_DEFAULT_SHELL) or default_shell_name(),
    )

    program = classifier.classify(cmdline)
    mode = classifier.default_mode(program)
    color = get_mode_color(mode)
    rprint(f"[bold]{program}[/bold] → [{color}]{mode}[/{color}]")


@app.command("notify")
def notify(
    cmdline: Annotated[str, typer.Argument(help="Command line that is about to run")],
    session: SessionOption = None,
):
    """Tell the watcher a program is starting in the focused pane.

    Meant for shell preexec hooks, so the mode switches before the next poll:

    preexec() { autolock notify "$1" }
    """
    from ..logging_config import setup_cli_logging
    from ..program_channel import send_program_update

    setup_cli_logging()
    session = resolve_session(session)
    send_program_update(session, cmdline)
