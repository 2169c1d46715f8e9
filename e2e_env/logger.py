import logging
import sys
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.highlighter import NullHighlighter
from rich.markup import escape
from rich.theme import Theme

_ROOT_LOGGER_NAME = "e2e_env"
_CONFIGURED = False


LEVEL_STYLES = {
    "logging.level.debug": "dim",
    "logging.level.info": "cyan",
    "logging.level.warning": "yellow",
    "logging.level.error": "bold red",
    "logging.level.critical": "reverse bold red",
}


class ConsoleLogHandler(logging.Handler):
    """Log handler printing `[time] LEVEL message` through a Rich console."""

    def __init__(self, level=logging.NOTSET, file=None):
        super().__init__(level)
        self.console = Console(
            theme=Theme(LEVEL_STYLES),
            highlighter=NullHighlighter(),
            file=file if file is not None else sys.stderr,
        )

    def emit(self, record):
        try:
            style = f"logging.level.{record.levelname.lower()}"
            if style not in LEVEL_STYLES:
                style = "default"
            time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
            # Command output and kubectl contexts may contain square brackets.
            message = escape(record.getMessage())
            # Soft wrap keeps long command output on one line when stderr is not a terminal.
            self.console.print(
                f"[dim]{time_str}[/] [{style}]{record.levelname}[/] {message}",
                highlight=False,
                soft_wrap=True,
            )
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False) -> None:
    """
    Configure the `e2e_env` logger namespace once for the current process.

    Later calls only adjust the level, see `set_verbose`.
    """
    global _CONFIGURED
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    if not _CONFIGURED:
        if not logger.handlers:
            logger.addHandler(ConsoleLogHandler())
        logger.propagate = False
        _CONFIGURED = True
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def set_verbose(verbose: bool) -> None:
    logging.getLogger(_ROOT_LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.INFO)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the `e2e_env` namespace (e.g. `e2e_env.environment`)."""
    if not _CONFIGURED:
        configure_logging()
    return (
        logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
        if name
        else logging.getLogger(_ROOT_LOGGER_NAME)
    )
