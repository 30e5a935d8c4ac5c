"""
Tests for the structured console logger.
"""

import pytest

from vectorpose.models.enums import LogCategory, LogLevel
from vectorpose.utils.logger import (
    BoundLogger,
    Logger,
    configure_logger,
    get_category_logger,
    get_logger,
)


@pytest.fixture
def plain_logger():
    return Logger(min_level=LogLevel.DEBUG, use_colors=False)


class TestOutputFormat:

    def test_message_and_detail_tree(self, plain_logger, capsys):
        plain_logger.log(LogCategory.PLAYBACK, "Action started", action="shuffle", from_state="center")

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].endswith("PLAYBACK  ✓ Action started")
        assert lines[0].startswith("[")
        assert lines[1].strip() == "├─ action: shuffle"
        assert lines[2].strip() == "└─ from_state: center"

    def test_level_symbols(self, plain_logger, capsys):
        plain_logger.warn(LogCategory.CONFIG, "careful")
        plain_logger.error(LogCategory.CONFIG, "broken")

        out = capsys.readouterr().out
        assert "⚠ careful" in out
        assert "✗ broken" in out

    def test_no_ansi_codes_without_colors(self, plain_logger, capsys):
        plain_logger.info(LogCategory.MARKUP, "plain")
        assert "\033[" not in capsys.readouterr().out

    def test_colors_enabled(self, capsys):
        Logger(use_colors=True).info(LogCategory.MARKUP, "colored")
        assert "\033[" in capsys.readouterr().out


class TestLevels:

    def test_below_min_level_suppressed(self, capsys):
        logger = Logger(min_level=LogLevel.WARN, use_colors=False)
        logger.info(LogCategory.SYSTEM, "hidden")
        logger.debug(LogCategory.SYSTEM, "hidden too")

        assert capsys.readouterr().out == ""

    def test_suppressed_records_skip_sink(self):
        records = []
        logger = Logger(min_level=LogLevel.ERROR, use_colors=False)
        logger.set_sink(lambda *record: records.append(record))

        logger.warn(LogCategory.SYSTEM, "hidden")

        assert records == []


class TestSink:

    def test_sink_receives_flattened_record(self, plain_logger):
        records = []
        plain_logger.set_sink(lambda ts, level, category, message: records.append((level, category, message)))

        plain_logger.info(LogCategory.ROUTE, "Expanded", steps=4)

        assert records == [("INFO", "ROUTE", "Expanded (steps: 4)")]

    def test_detach_sink(self, plain_logger):
        records = []
        plain_logger.set_sink(lambda *record: records.append(record))
        plain_logger.set_sink(None)

        plain_logger.info(LogCategory.ROUTE, "quiet")

        assert records == []


class TestBoundLogger:

    def test_bound_category(self, plain_logger, capsys):
        log = plain_logger.for_category(LogCategory.TWEEN)
        log.info("Tween started")

        assert "TWEEN" in capsys.readouterr().out

    def test_category_override(self, plain_logger, capsys):
        log = plain_logger.for_category(LogCategory.TWEEN)
        log.log("Overridden", category=LogCategory.EVENT)

        assert "EVENT" in capsys.readouterr().out

    def test_with_category(self, plain_logger):
        log = plain_logger.for_category(LogCategory.TWEEN).with_category(LogCategory.CONFIG)
        assert isinstance(log, BoundLogger)


class TestSingleton:

    def test_get_logger_is_singleton(self):
        assert get_logger() is get_logger()

    def test_configure_mutates_in_place(self):
        logger = get_logger()
        previous = (logger.min_level, logger.use_colors)
        bound = get_category_logger(LogCategory.SYSTEM)
        try:
            configure_logger(LogLevel.DEBUG, use_colors=False)

            assert get_logger() is logger
            assert logger.min_level == LogLevel.DEBUG
            assert logger.use_colors is False
            assert bound._base is logger
        finally:
            configure_logger(*previous)
