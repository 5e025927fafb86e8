"""
Centralized logging configuration for the media transform handler.

Every record carries the Lambda request id of the invocation that emitted it,
so interleaved CloudWatch lines from warm containers can be told apart.
Outside Lambda (CLI, tests) the id renders as ``-``.
"""

import os
import sys
import logging
from contextvars import ContextVar
from typing import Optional

NO_REQUEST_ID = "-"

STRUCTURED_FORMAT = (
    "%(asctime)s | %(aws_request_id)s | %(name)s | %(levelname)-8s | "
    "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
)
SIMPLE_FORMAT = "%(asctime)s - %(aws_request_id)s - %(name)s - %(levelname)s - %(message)s"

_request_id: ContextVar[str] = ContextVar("aws_request_id", default=NO_REQUEST_ID)


def set_request_id(request_id: Optional[str]) -> None:
    """Tag log records emitted from now on with this invocation's id."""
    _request_id.set(request_id or NO_REQUEST_ID)


def clear_request_id() -> None:
    _request_id.set(NO_REQUEST_ID)


def current_request_id() -> str:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Stamp ``aws_request_id`` onto each record passing through a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "aws_request_id", None):
            record.aws_request_id = _request_id.get()
        return True


def setup_logger(
    name: str = "media-transform",
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    Args:
        name: Logger name (defaults to "media-transform")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)

    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        env_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_level = getattr(logging, env_level, logging.INFO)

    logger.setLevel(log_level)

    # Lambda re-uses the process between invocations
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.addFilter(RequestIdFilter())

        env_format = os.getenv("LOG_FORMAT", format_type).lower()
        if env_format == "structured":
            formatter = logging.Formatter(STRUCTURED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        else:
            formatter = logging.Formatter(SIMPLE_FORMAT)

        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # the Lambda runtime installs its own root handler
    logger.propagate = False
    return logger


def get_logger(name: str = "media-transform") -> logging.Logger:
    """Get a logger instance with consistent configuration."""
    return setup_logger(name)
