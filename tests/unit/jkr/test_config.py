# -*- coding: utf-8 -*-
"""Unit tests for jkr settings and logging."""

import logging

import pytest
from pydantic import ValidationError

from jkr.config import get_settings, settings, Settings
from jkr.constants import MAX_NESTING_LIMIT
from jkr.logging_service import configure_package_logger, get_logger, PACKAGE_LOGGER


class TestSettings:
    """Defaults, validation and environment overrides."""

    def test_defaults(self):
        """Defaults match the documented values."""
        s = Settings()
        assert s.log_level is None
        assert s.max_depth == 200
        assert s.max_decompressed_bytes is None
        assert s.read_chunk_size == 65536

    @pytest.mark.parametrize("level", ["debug", "Info", "ERROR"])
    def test_log_level_normalized(self, level):
        """Log levels are case-insensitive."""
        assert Settings(log_level=level).log_level == level.upper()

    def test_invalid_log_level(self):
        """Unknown levels are rejected."""
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    @pytest.mark.parametrize("field", ["max_depth", "read_chunk_size", "max_decompressed_bytes"])
    def test_sizes_must_be_positive(self, field):
        """Zero is not a valid bound."""
        with pytest.raises(ValidationError):
            Settings(**{field: 0})

    def test_max_depth_is_capped(self):
        """Depths the interpreter stack cannot hold are rejected."""
        assert Settings(max_depth=MAX_NESTING_LIMIT).max_depth == MAX_NESTING_LIMIT
        with pytest.raises(ValidationError):
            Settings(max_depth=MAX_NESTING_LIMIT + 1)

    def test_max_depth_cap_from_environment(self, monkeypatch):
        """An oversized JKR_MAX_DEPTH fails at load time."""
        monkeypatch.setenv("JKR_MAX_DEPTH", "5000")
        with pytest.raises(ValidationError):
            get_settings()

    def test_environment_override(self, monkeypatch):
        """JKR_ variables override defaults."""
        monkeypatch.setenv("JKR_MAX_DEPTH", "12")
        monkeypatch.setenv("JKR_MAX_DECOMPRESSED_BYTES", "4096")
        s = Settings()
        assert s.max_depth == 12
        assert s.max_decompressed_bytes == 4096

    def test_get_settings_is_cached(self):
        """The same instance is returned until the cache is cleared."""
        first = get_settings()
        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings() is not first

    def test_lazy_wrapper_forwards(self, monkeypatch):
        """The module-level settings object reads through the cache."""
        monkeypatch.setenv("JKR_READ_CHUNK_SIZE", "7")
        assert settings.read_chunk_size == 7


class TestLogging:
    """Package logger setup."""

    def test_null_handler_installed_once(self):
        """Repeated configuration adds a single NullHandler."""
        configure_package_logger()
        logger = configure_package_logger()
        assert sum(isinstance(h, logging.NullHandler) for h in logger.handlers) == 1

    def test_level_left_unset_by_default(self):
        """Without JKR_LOG_LEVEL the application's level is not overridden."""
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(logging.NOTSET)
        assert configure_package_logger().level == logging.NOTSET

    def test_application_level_preserved(self):
        """A level set by the application survives reconfiguration."""
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        package_logger.setLevel(logging.ERROR)
        try:
            assert configure_package_logger().level == logging.ERROR
        finally:
            package_logger.setLevel(logging.NOTSET)

    def test_level_from_settings(self, monkeypatch):
        """The level comes from JKR_LOG_LEVEL."""
        monkeypatch.setenv("JKR_LOG_LEVEL", "debug")
        try:
            assert configure_package_logger().level == logging.DEBUG
        finally:
            logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)

    def test_child_logger(self):
        """Module loggers propagate to the package logger."""
        logger = get_logger("jkr.encoder")
        assert logger.parent is logging.getLogger(PACKAGE_LOGGER)

    def test_placeholder_logged(self, caplog):
        """Placeholder substitution is logged at debug level."""
        from jkr.encoder import dumps

        configure_package_logger("DEBUG")
        try:
            with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER):
                dumps({"card": {"is": len}})
        finally:
            logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)
        assert any("MANUAL_REPLACE" in r.getMessage() or "placeholder" in r.getMessage() for r in caplog.records)
