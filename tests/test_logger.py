"""Tests for the logging setup module."""

import logging

from src.utils.logger import get_logger, setup_logging


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def setup_method(self) -> None:
        self.root = logging.getLogger()
        self.saved_level = self.root.level

    def teardown_method(self) -> None:
        self.root.handlers.clear()
        self.root.setLevel(self.saved_level)

    def test_setup_creates_handler(self) -> None:
        self.root.handlers.clear()
        setup_logging("DEBUG")
        assert len(self.root.handlers) == 1
        assert self.root.level == logging.DEBUG

    def test_setup_idempotent(self) -> None:
        self.root.handlers.clear()
        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(self.root.handlers) == 1
        assert self.root.level == logging.INFO

    def test_invalid_level_defaults_to_info(self) -> None:
        self.root.handlers.clear()
        setup_logging("NONEXISTENT")
        assert self.root.level == logging.INFO

    def test_non_level_attribute_defaults_to_info(self) -> None:
        self.root.handlers.clear()
        setup_logging("basic_format")
        assert self.root.level == logging.INFO


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_returns_named_logger(self) -> None:
        logger = get_logger("test.module")
        assert logger.name == "test.module"
        assert get_logger("test.module") is logger
