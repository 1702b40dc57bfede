"""Process-wide logging setup for the insight layer, driven by environment variables."""

import os
import logging
import sys
from typing import Optional
from pythonjsonlogger import jsonlogger

HANDLER_NAME = "habitus"

# HTTP client libraries log every request at INFO; the gateway already logs one line per call
QUIET_LOGGERS = ("httpx", "httpcore")


class LoggingConfig:
    """Logging switches read once at import time."""

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json").lower()
    # Prompts and completions can quote user messages; set false to keep them out of logs
    LOG_MESSAGE_CONTENT = os.environ.get("LOG_MESSAGE_CONTENT", "true").lower() == "true"
    LOG_MASK_SENSITIVE = os.environ.get("LOG_MASK_SENSITIVE", "true").lower() == "true"
    LOG_PREVIEW_LENGTH = int(os.environ.get("LOG_PREVIEW_LENGTH", "100"))
    # Model calls routinely take seconds; only flag the ones near the request timeout
    LOG_SLOW_OPERATION_THRESHOLD_MS = int(os.environ.get("LOG_SLOW_OPERATION_THRESHOLD_MS", "5000"))

    @classmethod
    def build_formatter(cls, log_format: Optional[str] = None) -> logging.Formatter:
        if (log_format or cls.LOG_FORMAT) == "json":
            return jsonlogger.JsonFormatter(
                "%(timestamp)s %(levelname)s %(name)s %(correlation_id)s %(message)s",
                timestamp=True
            )
        return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    @classmethod
    def setup_logging(cls, log_level: Optional[str] = None, log_format: Optional[str] = None) -> logging.Handler:
        """
        Install the insight layer's stdout handler on the root logger.

        Safe to call more than once: a handler installed by an earlier call is
        replaced, and handlers owned by the host application are left alone.
        """
        level = getattr(logging, (log_level or cls.LOG_LEVEL).upper(), logging.INFO)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        for existing in list(root_logger.handlers):
            if existing.get_name() == HANDLER_NAME:
                root_logger.removeHandler(existing)

        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setLevel(level)
        handler.setFormatter(cls.build_formatter(log_format))
        root_logger.addHandler(handler)

        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

        return handler


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
