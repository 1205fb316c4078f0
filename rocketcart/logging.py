"""
Logging for the cart.

Only the `rocketcart` logger is configured, so an embedding storefront
keeps control of its root logger. Modules use:

    from rocketcart.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from functools import cache

PACKAGE_LOGGER = "rocketcart"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Product ids longer than this are cut in log lines
MAX_LOGGED_ID = 8


def configure_logging(level: str | None = None) -> logging.Logger:
    """
    Attach a stdout handler to the package logger once.

    Level comes from the argument, then LOG_LEVEL, then INFO.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        # Inventory and Telegram requests are logged by our own clients
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logger


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value) -> str:
    """
    Make a caller-supplied product id safe for a log line (CWE-117).

    Control characters are escaped and the result is cut to MAX_LOGGED_ID.
    """
    if id_value is None or id_value == "":
        return "N/A"
    text = str(id_value).replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t").replace("\x00", "")
    return text[:MAX_LOGGED_ID]
