"""Tests for komments logging helpers."""

from __future__ import annotations

import logging

from colorama import Fore

from komments.logging import SUCCESS, ColorFormatter, configure_logging, get_logger


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("komments.test", level, __file__, 1, message, None, None)


def test_success_level_is_registered() -> None:
    assert logging.getLevelName(SUCCESS) == "SUCCESS"


def test_color_formatter_colors_by_level() -> None:
    formatter = ColorFormatter("[komments] %(message)s")

    assert formatter.format(_record(SUCCESS, "done")).startswith(Fore.GREEN)
    assert formatter.format(_record(logging.WARNING, "careful")).startswith(Fore.YELLOW)
    assert formatter.format(_record(logging.INFO, "plain")) == "[komments] plain"


def test_color_formatter_without_color() -> None:
    formatter = ColorFormatter("%(message)s", use_color=False)

    assert formatter.format(_record(logging.ERROR, "failed")) == "failed"


def test_configure_logging_replaces_handlers(tmp_path) -> None:
    configure_logging(verbose=True, use_color=False)
    logger = configure_logging(verbose=False, log_file=tmp_path / "komments.log", use_color=False)

    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2
    get_logger("test").info("written to file")
    for handler in logger.handlers:
        handler.flush()
    assert "written to file" in (tmp_path / "komments.log").read_text(encoding="utf-8")
    configure_logging(use_color=False)
