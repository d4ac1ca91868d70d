"""
Logging Configuration Tests

LOG_LEVEL environment variable control for applications embedding the
library.

Usage:
- LOG_LEVEL=DEBUG: All logs including request paths
- LOG_LEVEL=INFO: Normal logs (default)
- LOG_LEVEL=WARNING: Warnings and errors only
- LOG_LEVEL=ERROR: Errors only
"""

import importlib
import os
from unittest.mock import ANY, patch

import pytest


def _reload_and_get_level() -> str:
    """Helper to reload logging_config module and get current level."""
    import genai_protocol.logging_config as lc

    importlib.reload(lc)
    return lc.get_log_level()


class TestLogLevelConfiguration:
    """Tests for LOG_LEVEL environment variable configuration."""

    def test_log_level_default_is_info(self) -> None:
        # given
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("LOG_LEVEL", None)

            # when
            level = _reload_and_get_level()

        # then
        assert level == "INFO"

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR"])
    def test_valid_levels_are_accepted(self, level: str) -> None:
        # given / when
        with patch.dict(os.environ, {"LOG_LEVEL": level}):
            configured = _reload_and_get_level()

        # then
        assert configured == level

    def test_invalid_log_level_falls_back_to_info(self) -> None:
        """Invalid LOG_LEVEL values should fall back to INFO."""
        # given / when
        with patch.dict(os.environ, {"LOG_LEVEL": "INVALID"}):
            level = _reload_and_get_level()

        # then
        assert level == "INFO"

    def test_log_level_is_case_insensitive(self) -> None:
        # given / when
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}):
            level = _reload_and_get_level()

        # then
        assert level == "WARNING"


class TestConfigureLogging:
    def test_replaces_handlers_at_configured_level(self) -> None:
        # given
        from genai_protocol import logging_config

        # when
        with (
            patch.dict(os.environ, {"LOG_LEVEL": "ERROR"}),
            patch.object(logging_config.logger, "remove") as remove,
            patch.object(logging_config.logger, "add") as add,
        ):
            logging_config.configure_logging()

        # then
        remove.assert_called_once_with()
        add.assert_called_once_with(
            ANY, level="ERROR", format=logging_config.CONSOLE_FORMAT, colorize=True
        )
