"""Tests for the logging setup used by the console."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging

from config.logging_config import ColoredFormatter, setup_logger


def close_handlers(logger):
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestSetupLogger:
    def test_console_and_file_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "draw.log"
        logger = setup_logger(name="parking-lottery-test", log_file=str(log_file))
        try:
            assert len(logger.handlers) == 2
            logging.getLogger("parking-lottery-test.engine").info("Stage 1 (PcD): 2 participants")
            for handler in logger.handlers:
                handler.flush()
            assert "Stage 1 (PcD): 2 participants" in log_file.read_text(encoding="utf-8")
        finally:
            close_handlers(logger)

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logger(name="parking-lottery-test")
        logger = setup_logger(name="parking-lottery-test", colored=False)
        try:
            assert len(logger.handlers) == 1
            assert not isinstance(logger.handlers[0].formatter, ColoredFormatter)
        finally:
            close_handlers(logger)

    def test_colored_formatter_leaves_record_untouched(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
        output = ColoredFormatter("%(levelname)s %(message)s").format(record)
        assert "\033[33mWARNING" in output
        assert record.levelname == "WARNING"
