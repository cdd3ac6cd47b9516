"""Tests for logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from termbbs.config.settings import LoggingConfig
from termbbs.utils.logging import PACKAGE_LOGGER, setup_logging


@pytest.fixture(autouse=True)
def _reset_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def _owned_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "_termbbs_owned", False)]


class TestSetupLogging:
    def test_defaults(self) -> None:
        logger = setup_logging()
        assert logger is logging.getLogger(PACKAGE_LOGGER)
        assert logger.level == logging.INFO
        assert logger.propagate is False
        assert [type(h) for h in _owned_handlers(logger)] == [logging.StreamHandler]

    def test_debug_level(self) -> None:
        setup_logging(LoggingConfig(level="debug"))
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(LoggingConfig(level="chatty"))
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO

    def test_file_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "termbbs.log"
        logger = setup_logging(LoggingConfig(file=str(log_file)))
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        logging.getLogger("termbbs.test").info("hello file")
        for h in logger.handlers:
            h.flush()
        assert "hello file" in log_file.read_text()

    def test_repeated_setup_does_not_stack_handlers(self, tmp_path: Path) -> None:
        setup_logging()
        logger = setup_logging(LoggingConfig(file=str(tmp_path / "a.log")))
        logger = setup_logging()
        assert len(_owned_handlers(logger)) == 1

    def test_foreign_handlers_are_kept(self) -> None:
        logger = logging.getLogger(PACKAGE_LOGGER)
        foreign = logging.NullHandler()
        logger.addHandler(foreign)
        setup_logging()
        setup_logging()
        assert foreign in logger.handlers
