"""Tests for logging_config.py - stderr/file logging setup."""

import logging

import pytest

from bundle_treemap.logging_config import LOGGER_NAME, log_level, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)
    logging.getLogger(LOGGER_NAME).setLevel(logging.NOTSET)


class TestLogLevel:
    @pytest.mark.parametrize(
        "verbose, quiet, expected",
        [
            (False, False, logging.WARNING),
            (True, False, logging.DEBUG),
            (False, True, logging.ERROR),
            (True, True, logging.ERROR),
        ],
    )
    def test_levels(self, verbose, quiet, expected):
        assert log_level(verbose, quiet) == expected


class TestSetupLogging:
    def test_returns_package_logger(self, restore_root_logger):
        logger = setup_logging(verbose=True)
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG

    def test_log_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "treemap.log"
        logger = setup_logging(log_file=str(log_file))
        logger.warning("placeholder for https://example.com/app.js")
        for handler in logging.getLogger().handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "WARNING" in text
        assert "https://example.com/app.js" in text
