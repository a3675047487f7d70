"""Tests for logging configuration."""

import logging

from calorie_canvas.app_logging import configure_logging


def test_configure_logging_installs_one_handler() -> None:
    logger = logging.getLogger("calorie_canvas")
    logger.handlers.clear()

    configure_logging()
    configure_logging()

    assert len(logger.handlers) == 1
    assert logger.propagate is False


def test_configure_logging_applies_level_on_repeat_calls() -> None:
    logger = logging.getLogger("calorie_canvas")

    configure_logging(logging.DEBUG)
    assert logger.level == logging.DEBUG

    configure_logging(logging.WARNING)
    assert logger.level == logging.WARNING
    assert logging.getLogger("calorie_canvas.services.nutrition").isEnabledFor(
        logging.WARNING
    )
    assert not logging.getLogger("calorie_canvas.services.nutrition").isEnabledFor(
        logging.INFO
    )

    configure_logging()
