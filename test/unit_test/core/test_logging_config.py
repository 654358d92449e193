"""Unit tests for logging configuration module.

Tests verify that the logging configuration functions work correctly with different
scenarios including various log levels, formats, and file logging options.
"""

import logging
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from agrilink.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)


def _console_handler() -> logging.Handler:
    return next(
        h
        for h in logging.getLogger().handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    )


@pytest.fixture(autouse=True)
def _restore_root_handlers():
    root_logger = logging.getLogger()
    saved = root_logger.handlers[:]
    saved_level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if handler not in saved:
            handler.close()
    for handler in saved:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


class TestSetupLoggingLogLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("debug", logging.DEBUG),
        ],
    )
    def test_setup_logging_with_different_levels(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)

        assert _console_handler().level == expected_level

    def test_root_logger_captures_everything(self):
        setup_logging(log_level="ERROR", enable_file=False)

        assert logging.getLogger().level == logging.DEBUG


class TestSetupLoggingFormats:
    """Test setup_logging with different log formats."""

    @pytest.mark.parametrize(
        "log_format,expected_format",
        [
            ("simple", SIMPLE_FORMAT),
            ("detailed", DETAILED_FORMAT),
            ("json", JSON_FORMAT),
        ],
    )
    def test_setup_logging_with_different_formats(self, log_format, expected_format):
        setup_logging(log_format=log_format, enable_file=False)

        assert _console_handler().formatter._fmt == expected_format

    def test_unknown_format_falls_back_to_detailed(self):
        setup_logging(log_format="fancy", enable_file=False)

        assert _console_handler().formatter._fmt == DETAILED_FORMAT


class TestSetupLoggingFileHandling:
    """Test file handler creation."""

    def test_file_handler_when_enabled(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            log_dir = Path(tmpdir) / "nested"
            with patch("agrilink.core.logging_config.LOG_FILE_DIR", str(log_dir)), patch(
                "agrilink.core.logging_config.ENABLE_FILE_LOGGING", True
            ):
                setup_logging(log_level="INFO", enable_file=True)

                file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
                assert len(file_handlers) == 1
                assert file_handlers[0].level == logging.DEBUG
                assert (log_dir / "agrilink.log").exists()
                file_handlers[0].close()

    def test_no_file_handler_when_disabled(self):
        setup_logging(enable_file=False)

        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)

        assert len(logging.getLogger().handlers) == 1


class TestSetupLoggingModuleSpecificLevels:
    @pytest.mark.parametrize(
        "module_name,expected_level",
        [
            ("agrilink.server.services", "DEBUG"),
            ("agrilink.server.services.telemetry", "INFO"),
            ("sqlalchemy.engine", "WARNING"),
            ("httpx", "WARNING"),
        ],
    )
    def test_module_specific_log_levels(self, module_name, expected_level):
        setup_logging(enable_file=False)

        assert logging.getLogger(module_name).level == getattr(logging, expected_level)
        assert MODULE_LOG_LEVELS[module_name] == expected_level


class TestGetLogger:
    def test_get_logger_returns_named_logger(self):
        logger = get_logger("agrilink.server.services.devices")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "agrilink.server.services.devices"

    def test_same_name_returns_same_instance(self):
        assert get_logger("agrilink.test") is get_logger("agrilink.test")

    def test_logger_records_extra_fields(self, caplog):
        logger = get_logger("agrilink.server.services.alerts")

        with caplog.at_level(logging.INFO, logger="agrilink.server.services.alerts"):
            logger.info("Alert raised", extra={"device_id": "d-1"})

        assert caplog.records[-1].device_id == "d-1"
