"""
CLI interface for Autolock using Typer.
"""

# Import shared state (app, options, utilities) first
from ._shared import app, resolve_session, SessionOption  # noqa: F401

# Import submodules to register their commands with the Typer apps
from . import daemon  # noqa: F401
from . import programs  # noqa: F401
from . import config  # noqa: F401


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
