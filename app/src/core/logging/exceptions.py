import logging
import sys
import traceback
from typing import Any, Dict, Optional

from src.core.logging.filters import get_log_context

logger = logging.getLogger(__name__)


def log_exception_with_context(
    exc: Exception,
    message: str = "Exception occurred",
    level: int = logging.ERROR,
    extra_context: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log an exception with current context and additional information.

    Errors carrying a stable ``code`` (storage errors) have it added to the
    record as ``error_code``.

    Args:
        exc: The exception to log
        message: Custom message to include with the log
        level: Logging level to use
        extra_context: Additional context to include in the log
    """
    log_extra = {
        "event_type": "exception_logged",
        "exception_type": type(exc).__name__,
        "exception_message": str(exc),
        **get_log_context(),
    }

    code = getattr(exc, "code", None)
    if isinstance(code, str):
        log_extra["error_code"] = code

    if extra_context:
        log_extra.update(extra_context)

    logger.log(
        level,
        "%s: %s - %s",
        message,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
        extra=log_extra,
    )


def setup_exception_logging() -> None:
    """
    Install an excepthook that logs uncaught exceptions before the process exits.
    """
    original_excepthook = sys.excepthook

    def handle_uncaught_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, (KeyboardInterrupt, SystemExit)):
            original_excepthook(exc_type, exc_value, exc_traceback)
            return

        logger.critical(
            "Uncaught exception: %s - %s",
            exc_type.__name__,
            str(exc_value),
            exc_info=(exc_type, exc_value, exc_traceback),
            extra={
                "event_type": "uncaught_exception",
                "exception_type": exc_type.__name__,
                "exception_message": str(exc_value),
                "traceback_lines": traceback.format_exception(exc_type, exc_value, exc_traceback),
                **get_log_context(),
            },
        )

        original_excepthook(exc_type, exc_value, exc_traceback)

    sys.excepthook = handle_uncaught_exception
