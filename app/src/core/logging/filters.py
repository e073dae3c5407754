import contextvars
import logging
import os
import socket
from contextlib import contextmanager
from typing import Any, Dict

_log_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar("log_context", default={})


class BaseContextFilter(logging.Filter):
    """
    Base filter that enriches log records and never drops them.

    Subclasses override ``add_context`` to attach attributes to the record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        self.add_context(record)
        return True

    def add_context(self, record: logging.LogRecord) -> None:
        pass


class GlobalContextFilter(BaseContextFilter):
    """
    Adds process wide attributes (host, pid, environment, app) to every record.
    """

    def __init__(self, name: str = "") -> None:
        super().__init__(name)

        self.hostname = socket.gethostname()
        self.process_id = os.getpid()
        self.environment = os.getenv("ENVIRONMENT", "local")
        self.app_name = os.getenv("APP_NAME", "bucket-storage")
        self.app_version = os.getenv("APP_VERSION", "0.1.0")

    def add_context(self, record: logging.LogRecord) -> None:
        record.hostname = self.hostname
        record.process_id = self.process_id
        record.environment = self.environment
        record.app_name = self.app_name
        record.app_version = self.app_version


class DynamicContextFilter(BaseContextFilter):
    """
    Copies the values bound with ``add_to_log_context`` onto the record,
    e.g. the category or config file currently being processed.
    """

    def add_context(self, record: logging.LogRecord) -> None:
        for key, value in _log_context.get().items():
            setattr(record, key, value)


class CombinedContextFilter(BaseContextFilter):
    """Applies the global and the dynamic context in one filter."""

    def __init__(self, name: str = "") -> None:
        super().__init__(name)

        self.global_filter = GlobalContextFilter(name)
        self.dynamic_filter = DynamicContextFilter(name)

    def add_context(self, record: logging.LogRecord) -> None:
        self.global_filter.add_context(record)
        self.dynamic_filter.add_context(record)


@contextmanager
def add_to_log_context(**kwargs: Any):
    """
    Context manager for temporarily adding context to logs.

    Args:
        **kwargs: Key-value pairs to add to the logging context

    Example:
        with add_to_log_context(category="avatars", config_file="categories.yaml"):
            logger.info("Validating category")
    """
    token = _log_context.set({**_log_context.get(), **kwargs})

    try:
        yield
    finally:
        _log_context.reset(token)


def get_log_context() -> Dict[str, Any]:
    """
    Get the current logging context.

    Returns:
        Dictionary containing the current logging context
    """
    return _log_context.get()


def clear_log_context() -> None:
    _log_context.set({})
