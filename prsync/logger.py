"""Logging setup for prsync.

Library modules log through ``logging.getLogger(__name__)``; the CLI calls
:func:`setup_logging` once to route those records to a Rich console and,
inside GitHub Actions, to workflow command annotations.
"""

import logging
import os
import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "prsync"


class GitHubActionsHandler(logging.Handler):
    """Emit warnings and errors as GitHub Actions workflow commands."""

    _COMMANDS = {
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def __init__(self, stream: Optional[TextIO] = None):
        """Initialize handler.

        Args:
            stream: Output stream (defaults to stdout, which the runner parses)
        """
        super().__init__(level=logging.WARNING)
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        command = self._COMMANDS.get(record.levelno)
        if command is None:
            return
        try:
            message = _escape_data(self.format(record))
            stream = self.stream or sys.stdout
            stream.write(f"::{command}::{message}\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def _escape_data(value: str) -> str:
    """Escape a message for a workflow command."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def in_github_actions(environ: Optional[dict] = None) -> bool:
    """Check if running inside a GitHub Actions job."""
    env = os.environ if environ is None else environ
    return env.get("GITHUB_ACTIONS") == "true"


def setup_logging(
    *,
    verbose: bool = False,
    console: Optional[Console] = None,
    annotations: Optional[bool] = None,
) -> logging.Logger:
    """Configure the prsync logger.

    Args:
        verbose: Log debug messages
        console: Rich console for log output (defaults to stderr)
        annotations: Emit workflow annotations (defaults to GITHUB_ACTIONS detection)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=verbose,
        markup=False,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(rich_handler)

    if annotations is None:
        annotations = in_github_actions()
    if annotations:
        actions_handler = GitHubActionsHandler()
        actions_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(actions_handler)

    return logger
