"""
Unit tests for the logging helpers.
"""

import logging

import pytest

from ragbot.src.utils.logger import get_logger, log_duration, resolve_level


class TestResolveLevel:

    @pytest.mark.parametrize("env, expected", [
        ("dev", logging.DEBUG),
        ("prod", logging.WARNING),
        ("staging", logging.INFO),
    ])
    def test_from_env(self, env, expected):
        assert resolve_level(env) == expected

    def test_explicit_level_wins(self):
        assert resolve_level("prod", "debug") == logging.DEBUG
        assert resolve_level("dev", "ERROR") == logging.ERROR


class TestGetLogger:

    def test_single_handler_on_repeat_calls(self):
        first = get_logger("ragbot.tests.repeat")
        second = get_logger("ragbot.tests.repeat")

        assert first is second
        assert len(second.handlers) == 1
        assert second.propagate is False

    def test_explicit_level(self):
        assert get_logger("ragbot.tests.explicit", level=logging.ERROR).level == logging.ERROR


class _ListHandler(logging.Handler):

    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


class TestLogDuration:

    @pytest.fixture
    def captured(self):
        logger = logging.getLogger("ragbot.tests.duration")
        logger.setLevel(logging.DEBUG)
        handler = _ListHandler()
        logger.addHandler(handler)
        yield logger, handler
        logger.removeHandler(handler)

    def test_records_elapsed_ms(self, captured):
        logger, handler = captured

        with log_duration(logger, "Embed query") as timing:
            pass

        assert timing.ms >= 0.0
        assert len(handler.messages) == 1
        assert handler.messages[0].startswith("Embed query took ")
        assert handler.messages[0].endswith("ms")

    def test_nothing_logged_when_block_raises(self, captured):
        logger, handler = captured

        with pytest.raises(RuntimeError):
            with log_duration(logger, "Completion"):
                raise RuntimeError("provider down")

        assert handler.messages == []
