# shared service logger, import `logger` from here instead of configuring logging per module

import logging
import os
import sys

LOGGER_NAME = "journal_brain"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(module)s:%(lineno)d - %(message)s"

def _build_logger() -> logging.Logger:
    """
    Configures the service logger once at import time.
    Level can be overridden with the LOG_LEVEL env var (defaults to INFO).
    """
    service_logger = logging.getLogger(LOGGER_NAME)
    if not service_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        service_logger.addHandler(handler)
    service_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    # NOTE: don't double-log through the root logger (uvicorn configures its own handlers)
    service_logger.propagate = False
    return service_logger

logger = _build_logger()
