# Tests for prsync.logger
# Rich console logging and GitHub Actions annotations

import logging
from io import StringIO

from rich.console import Console
from rich.logging import RichHandler

from prsync.logger import LOGGER_NAME, GitHubActionsHandler, in_github_actions, setup_logging


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("prsync.test", level, __file__, 1, message, None, None)


class TestGitHubActionsHandler:
    """Tests for workflow command output."""

    def test_warning(self):
        stream = StringIO()
        GitHubActionsHandler(stream).handle(_record(logging.WARNING, "probe failed"))
        assert stream.getvalue() == "::warning::probe failed\n"

    def test_error(self):
        stream = StringIO()
        GitHubActionsHandler(stream).handle(_record(logging.ERROR, "write failed"))
        assert stream.getvalue() == "::error::write failed\n"

    def test_info_ignored(self):
        stream = StringIO()
        GitHubActionsHandler(stream).handle(_record(logging.INFO, "hello"))
        assert stream.getvalue() == ""

    def test_escapes_message(self):
        stream = StringIO()
        GitHubActionsHandler(stream).handle(_record(logging.ERROR, "100% broken\r\nsecond line"))
        assert stream.getvalue() == "::error::100%25 broken%0D%0Asecond line\n"


class TestInGitHubActions:
    """Tests for runner detection."""

    def test_detected(self):
        assert in_github_actions({"GITHUB_ACTIONS": "true"}) is True

    def test_not_detected(self):
        assert in_github_actions({}) is False
        assert in_github_actions({"GITHUB_ACTIONS": "false"}) is False


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_default_level(self):
        logger = setup_logging(console=Console(file=StringIO()), annotations=False)
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.INFO
        assert logger.propagate is False
        assert [type(h) for h in logger.handlers] == [RichHandler]

    def test_verbose(self):
        logger = setup_logging(verbose=True, console=Console(file=StringIO()), annotations=False)
        assert logger.level == logging.DEBUG

    def test_annotations(self):
        logger = setup_logging(console=Console(file=StringIO()), annotations=True)
        assert any(isinstance(h, GitHubActionsHandler) for h in logger.handlers)

    def test_auto_detects_actions(self, monkeypatch):
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        logger = setup_logging(console=Console(file=StringIO()))
        assert any(isinstance(h, GitHubActionsHandler) for h in logger.handlers)

    def test_repeated_setup_replaces_handlers(self):
        setup_logging(console=Console(file=StringIO()), annotations=True)
        logger = setup_logging(console=Console(file=StringIO()), annotations=False)
        assert len(logger.handlers) == 1

    def test_module_loggers_reach_console(self):
        output = StringIO()
        setup_logging(console=Console(file=output, width=200), annotations=False)
        logging.getLogger("prsync.sync.engine").info("Starting sync for LICENSE")
        assert "Starting sync for LICENSE" in output.getvalue()
