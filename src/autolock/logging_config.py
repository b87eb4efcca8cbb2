"""
Logging configuration for Autolock.

All loggers live under the "autolock" namespace so a single call to
setup_logging() controls the whole package. Console output goes through
rich when requested; file output is always plain text.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from .settings import get_log_dir

ROOT_LOGGER_NAME = "autolock"

FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the autolock namespace (autolock.<name>)."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True,
    rich_console: bool = False,
) -> logging.Logger:
    """Configure the autolock root logger.

    Existing handlers are removed first so repeated calls don't duplicate
    output.

    Args:
        level: Logging level for the autolock namespace
        log_file: Optional file to append plain-text records to
        console: Whether to log to the console
        rich_console: Use rich's handler for console output

    Returns:
        The autolock root logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(level)

    if console:
        if rich_console:
            handler: logging.Handler = RichHandler(
                console=Console(stderr=True),
                show_path=False,
                rich_tracebacks=True,
            )
            handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        else:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def setup_daemon_logging(
    log_file: Optional[Path] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Configure logging for the watcher daemon: rich console plus log file."""
    if log_file is None:
        log_file = get_log_dir() / "daemon.log"
    setup_logging(level=level, log_file=log_file, console=True, rich_console=True)
    return get_logger("daemon")


def setup_cli_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging for one-shot CLI commands (quiet unless verbose)."""
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING, console=True, rich_console=True)
    return get_logger("cli")


class StructuredLogger:
    """Logger wrapper that appends key=value context to every message."""

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None):
        self._logger = logger
        self._context: Dict[str, Any] = dict(context or {})

    def with_context(self, **kwargs: Any) -> "StructuredLogger":
        """Return a new logger with extra context merged in."""
        merged = {**self._context, **kwargs}
        return StructuredLogger(self._logger, merged)

    def _format(self, message: str, kwargs: Dict[str, Any]) -> str:
        fields = {**self._context, **kwargs}
        if not fields:
            return message
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{message} [{rendered}]"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._format(message, kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._format(message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._format(message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(self._format(message, kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        self._logger.exception(self._format(message, kwargs))


def get_structured_logger(name: str) -> StructuredLogger:
    return StructuredLogger(get_logger(name))
