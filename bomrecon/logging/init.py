from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging for comparison runs.

Every line is `<LABEL> <message>`: DEBUG, INFO, WARN, ERROR, or SUMMARY for
the result-count line that closes a run. Modules log through
`logging.getLogger(__name__)` and reach the console through the `bomrecon`
parent logger, which owns the only handler.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_debug",
    "setup_logging",
]

LOGGER_NAME = "bomrecon"

# between INFO (20) and WARNING (30): shown at the default level
SUMMARY_LEVEL = 25
logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

_configured: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """`<LABEL> <message>`; WARNING is shortened to WARN."""

    SHORT_LABELS = {"WARNING": "WARN"}

    def format(self, record: logging.LogRecord) -> str:
        label = self.SHORT_LABELS.get(record.levelname, record.levelname)
        return f"{label} {record.getMessage()}"


def setup_logging(stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled console handler to the `bomrecon` logger.

    Calling it again returns the logger configured the first time.

    Args:
        stream: target of the handler (stdout when omitted)
    """
    global _configured
    if _configured is not None:
        return _configured

    logger = logging.getLogger(LOGGER_NAME)
    for stale in list(logger.handlers):
        logger.removeHandler(stale)

    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setFormatter(LabeledFormatter())
    console.setLevel(logging.INFO)
    logger.addHandler(console)
    logger.setLevel(logging.INFO)
    # records stop here; the root logger would print them twice
    logger.propagate = False

    _configured = logger
    return logger


def get_logger() -> logging.Logger:
    return _configured if _configured is not None else setup_logging()


def set_debug(logger: logging.Logger) -> None:
    """Let DEBUG records through the logger and all of its handlers."""
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup starts over (tests)."""
    global _configured
    _configured = None
