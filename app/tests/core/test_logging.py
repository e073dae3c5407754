import logging

from src.core.logging import add_to_log_context, clear_log_context, get_log_context, get_logging_config
from src.core.logging.filters import CombinedContextFilter, DynamicContextFilter
from src.core.logging.formatters import ConsoleFormatter
from src.libs.storage.exceptions import InvalidConfigError


def make_record(exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="src.libs.storage.loader",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="Failed to load storage categories",
        args=(),
        exc_info=exc_info,
    )


class TestLogContext:
    """Test cases for the contextvars backed log context"""

    def teardown_method(self):
        clear_log_context()

    def test_context_is_scoped(self):
        with add_to_log_context(config_file="categories.yaml"):
            with add_to_log_context(category="avatars"):
                assert get_log_context() == {"config_file": "categories.yaml", "category": "avatars"}
            assert get_log_context() == {"config_file": "categories.yaml"}

        assert get_log_context() == {}

    def test_dynamic_filter_copies_context(self):
        record = make_record()

        with add_to_log_context(category="avatars"):
            assert DynamicContextFilter().filter(record) is True

        assert record.category == "avatars"

    def test_combined_filter_adds_process_context(self):
        record = make_record()

        CombinedContextFilter().filter(record)

        assert record.process_id > 0
        assert record.hostname


class TestFormatters:
    """Test cases for the JSON formatters"""

    def test_storage_error_code_is_structured(self):
        try:
            raise InvalidConfigError("BucketSuffix is required")
        except InvalidConfigError as e:
            record = make_record(exc_info=(type(e), e, e.__traceback__))

        output = ConsoleFormatter().format(record)

        assert '"code": "INVALID_CONFIG"' in output
        assert '"message": "BucketSuffix is required"' in output
        assert '"level": "ERROR"' in output


class TestLoggingConfig:
    """Test cases for get_logging_config"""

    def test_application_logger_is_configured(self):
        config = get_logging_config()

        assert config["version"] == 1
        assert config["disable_existing_loggers"] is False
        assert "src" in config["loggers"]
        assert config["loggers"]["src"]["handlers"] == config["root"]["handlers"]
        assert all("context_filter" in handler["filters"] for handler in config["handlers"].values())
