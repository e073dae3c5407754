import traceback
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

DEFAULT_RENAME_FIELDS = {
    "levelname": "level",
    "asctime": "timestamp",
    "name": "logger",
}


class StructuredExceptionJsonFormatter(JsonFormatter):
    """
    A JSON formatter that turns exception info into structured data.

    Besides the exception type, message and traceback, storage errors expose
    their stable ``code`` so log pipelines can group configuration failures.
    """

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        rename_fields: Optional[Dict[str, str]] = None,
        static_fields: Optional[Dict[str, Any]] = None,
        json_ensure_ascii: bool = True,
        **kwargs,
    ):
        # dictConfig passes the format string as "format"
        fmt = fmt or kwargs.pop("format", None)
        kwargs.pop("()", None)

        options = {
            "fmt": fmt,
            "datefmt": datefmt,
            "rename_fields": rename_fields,
            "static_fields": static_fields,
            "json_ensure_ascii": json_ensure_ascii,
        }

        super().__init__(**{key: value for key, value in options.items() if value is not None})

    def add_fields(self, log_record: Dict[str, Any], record: Any, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if not record.exc_info:
            return

        exc_type, exc_value, exc_traceback = record.exc_info

        exception_data = {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc_value) if exc_value else None,
            "traceback": None,
        }

        code = getattr(exc_value, "code", None)
        if isinstance(code, str):
            exception_data["code"] = code

        if exc_traceback:
            exception_data["traceback"] = traceback.format_exception(exc_type, exc_value, exc_traceback)

        log_record["exception"] = exception_data

        log_record.pop("exc_info", None)
        log_record.pop("exc_text", None)


class ConsoleFormatter(StructuredExceptionJsonFormatter):
    """Compact JSON output for local development."""

    def __init__(self, **kwargs):
        fmt = kwargs.pop("format", "%(asctime)s %(name)s %(levelname)s %(message)s")
        datefmt = kwargs.pop("datefmt", "%Y-%m-%d %H:%M:%S")
        rename_fields = {**DEFAULT_RENAME_FIELDS, **kwargs.pop("rename_fields", {})}

        super().__init__(fmt=fmt, datefmt=datefmt, rename_fields=rename_fields, **kwargs)


class ProductionFormatter(StructuredExceptionJsonFormatter):
    """
    Full JSON output for deployed environments, including source location
    and process/thread identifiers.
    """

    def __init__(self, **kwargs):
        fmt = kwargs.pop(
            "format",
            "%(asctime)s %(name)s %(levelname)s %(message)s "
            "%(pathname)s %(lineno)d %(funcName)s %(process)d %(thread)d",
        )
        datefmt = kwargs.pop("datefmt", "%Y-%m-%dT%H:%M:%S")
        rename_fields = {
            **DEFAULT_RENAME_FIELDS,
            "pathname": "file_path",
            "lineno": "line_number",
            "funcName": "function_name",
            "process": "process_id",
            "thread": "thread_id",
            **kwargs.pop("rename_fields", {}),
        }

        super().__init__(fmt=fmt, datefmt=datefmt, rename_fields=rename_fields, **kwargs)
