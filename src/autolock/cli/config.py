"""
Config commands: init, show, path.
"""

from typing import Annotated

import typer
from rich import print as rprint

from ._shared import config_app


CONFIG_TEMPLATE = """\
# Autolock configuration
# Location: ~/.autolock/config.yaml

# Programs whose panes start in locked mode
# locked_mode_programs:
#   - vim
#   - nvim
#   - hx

# Shell assumed for panes whose command is unknown (default: $SHELL)
# default_shell: zsh

# Hide the plugin pane once permissions are granted (plugin hosts only)
# hide: true

# tmux host settings. Locked mode sets the session key-table to
# locked_key_table; define that table in tmux.conf, e.g.:
#   bind -T locked C-g set key-table root
# tmux:
#   locked_key_table: locked
#   normal_key_table: root
#   poll_interval: 0.5  # seconds
"""


@config_app.callback(invoke_without_command=True)
def config_default(ctx: typer.Context):
    """Show current configuration (default when no subcommand given)."""
    if ctx.invoked_subcommand is None:
        _config_show()


@config_app.command("init")
def config_init(
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite existing config file")
    ] = False,
):
    """Create a config file with documented defaults.

    Creates ~/.autolock/config.yaml with all options commented out.
    Use --force to overwrite an existing config file.
    """
    from .. import config

    config.CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)

    if config.CONFIG_PATH.exists() and not force:
        rprint(f"[yellow]Config file already exists:[/yellow] {config.CONFIG_PATH}")
        rprint("[dim]Use --force to overwrite[/dim]")
        raise typer.Exit(1)

    config.CONFIG_PATH.write_text(CONFIG_TEMPLATE)
    rprint(f"[green]✓[/green] Created config file: [bold]{config.CONFIG_PATH}[/bold]")
    rprint("[dim]Edit to customize your settings[/dim]")


@config_app.command("show")
def config_show():
    """Show current configuration."""
    _config_show()


def _config_show():
    """Internal function to display the effective configuration."""
    from .. import config
    from ..plugin import CONFIG_DEFAULT_SHELL, CONFIG_HIDE, CONFIG_LOCKED_PROGRAMS

    if not config.CONFIG_PATH.exists():
        rprint(f"[dim]No config file found at {config.CONFIG_PATH}, using defaults[/dim]")
        rprint("[dim]Run 'autolock config init' to create one[/dim]")
    else:
        rprint(f"[bold]Configuration[/bold] ({config.CONFIG_PATH}):\n")

    plugin_config = config.get_plugin_configuration()
    tmux = config.get_tmux_config()

    rprint(f"  locked_mode_programs: {plugin_config[CONFIG_LOCKED_PROGRAMS] or '(none)'}")
    if CONFIG_DEFAULT_SHELL in plugin_config:
        rprint(f"  default_shell: {plugin_config[CONFIG_DEFAULT_SHELL]}")
    if CONFIG_HIDE in plugin_config:
        rprint(f"  hide: {plugin_config[CONFIG_HIDE]}")
    rprint("  tmux:")
    rprint(f"    locked_key_table: {tmux['locked_key_table']}")
    rprint(f"    normal_key_table: {tmux['normal_key_table']}")
    rprint(f"    poll_interval: {tmux['poll_interval']}s")


@config_app.command("path")
def config_path():
    """Show the config file path."""
    from .. import config
    print(config.CONFIG_PATH)
