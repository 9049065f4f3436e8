"""
Logging setup.

Library modules log under the `lpmanager` namespace. On a terminal the
records go through Rich; inside the TUI they are forwarded to the RichLog
widgets by RichLogHandler.
"""

import logging
from typing import Callable, Optional

from rich.logging import RichHandler
from rich.markup import escape

LOGGER_NAME = "lpmanager"

LEVEL_STYLES = {
    logging.DEBUG: "dim",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold red",
}


class RichLogHandler(logging.Handler):
    """Sends formatted records to a callback that accepts Rich markup."""

    def __init__(self, callback: Callable[[str], None], level=logging.INFO):
        super().__init__(level)
        self.callback = callback

    def emit(self, record):
        try:
            # Escaping content to prevent markup errors from raw command output
            message = escape(self.format(record))
            style = LEVEL_STYLES.get(record.levelno)
            if style:
                message = f"[{style}]{message}[/{style}]"
            self.callback(message)
        except Exception:
            self.handleError(record)


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """
    Configures the `lpmanager` logger.

    Args:
        level: Base logging level
        log_file: Optional path to also write logs to
        verbose: If True, sets level to DEBUG
    """
    if verbose:
        level = logging.DEBUG

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    console = RichHandler(level=level, show_path=False, markup=False)
    logger.addHandler(console)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning("Could not open log file %s: %s", log_file, e)

    return logger


def attach_callback(callback: Callable[[str], None], level: int = logging.INFO) -> RichLogHandler:
    """Routes `lpmanager` log records to `callback`. Returns the handler for later removal."""
    handler = RichLogHandler(callback, level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)
    return handler
