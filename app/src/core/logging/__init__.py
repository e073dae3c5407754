"""
Structured logging for the storage configuration package.

Usage:
    from src.core.logging import setup_logging, get_logger, add_to_log_context

    setup_logging()

    logger = get_logger(__name__)

    with add_to_log_context(category="avatars"):
        logger.info("Category registered")
"""

from .config import get_logger, get_logging_config, setup_logging
from .exceptions import log_exception_with_context, setup_exception_logging
from .filters import add_to_log_context, clear_log_context, get_log_context

__all__ = [
    "setup_logging",
    "get_logging_config",
    "setup_exception_logging",
    "get_logger",
    "add_to_log_context",
    "get_log_context",
    "clear_log_context",
    "log_exception_with_context",
]
