"""Opt-in log output for applications embedding brepjoin.

The library itself only creates module loggers under the ``brepjoin``
namespace and never installs handlers on import.
"""

import logging
import sys
from typing import List, Optional, TextIO

LOGGER_NAME = "brepjoin"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# handlers installed by setup_logging, replaced on the next call
_installed: List[logging.Handler] = []


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> logging.Logger:
    """Send ``brepjoin`` log records to ``stream`` (stderr) and optionally a file.

    Calling it again replaces the handlers from the previous call; any
    handler the application attached itself is left in place.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    while _installed:
        old = _installed.pop()
        logger.removeHandler(old)
        old.close()

    handlers: List[logging.Handler] = [
        logging.StreamHandler(stream if stream is not None else sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        _installed.append(handler)
    return logger
