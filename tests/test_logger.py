"""Tests for logger module."""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

from strikeguard.util import logger as logger_module
from strikeguard.util.logger import (
    DATE_FORMAT,
    LOG_COLORS,
    LOG_FORMAT,
    RESET_COLOR,
    ColorFormatter,
    PromptToolkitHandler,
    get_logger,
    handle_exception,
    should_use_color,
)


class TestShouldUseColor:
    @patch('sys.stderr.isatty')
    def test_should_use_color_tty(self, mock_isatty):
        mock_isatty.return_value = True
        assert should_use_color() is True

    @patch('sys.stderr.isatty')
    def test_should_use_color_no_tty(self, mock_isatty):
        mock_isatty.return_value = False
        assert should_use_color() is False

    @patch('sys.stderr.isatty')
    def test_should_use_color_exception(self, mock_isatty):
        mock_isatty.side_effect = Exception("Error")
        assert should_use_color() is False


def make_record(level: int) -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=level, pathname="test.py", lineno=10, msg="hello", args=(), exc_info=None
    )


def test_color_formatter_wraps_known_levels():
    formatted = ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT).format(make_record(logging.WARNING))

    assert formatted.startswith(LOG_COLORS["WARNING"])
    assert formatted.endswith(RESET_COLOR)
    assert "hello" in formatted


def test_get_logger_configures_handlers_once():
    first = get_logger("strikeguard.test_logger")
    second = get_logger("strikeguard.test_logger")

    assert first is second
    assert len(first.handlers) == 2
    assert any(isinstance(h, PromptToolkitHandler) for h in first.handlers)
    assert any(isinstance(h, RotatingFileHandler) for h in first.handlers)
    assert first.propagate is False


def test_log_filepath_is_shared():
    assert logger_module.get_log_filepath() == logger_module.get_log_filepath()


def test_noisy_loggers_silenced():
    assert logging.getLogger("discord.gateway").level == logging.ERROR


def test_handle_exception_logs_errors():
    with patch.object(logging, "error") as mock_error:
        handle_exception(ValueError, ValueError("bad"), None)

    mock_error.assert_called_once()


def test_handle_exception_passes_keyboard_interrupt():
    with patch("sys.__excepthook__") as mock_hook:
        handle_exception(KeyboardInterrupt, KeyboardInterrupt(), None)

    mock_hook.assert_called_once()
