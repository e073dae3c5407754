import sys

from src.core.config import get_settings
from src.core.logging import get_logger, get_logging_config, setup_exception_logging, setup_logging
from src.libs.storage import (
    CategoryRegistry,
    InvalidConfigError,
    StorageConfig,
    load_category_registry,
    storage_config_from_settings,
)

logger = get_logger(__name__)


def bootstrap() -> tuple[StorageConfig, CategoryRegistry]:
    """
    Load and validate the storage connection and the category definitions.

    Meant to run once at process startup so that misconfiguration stops the
    process before any request is served.

    Returns:
        tuple[StorageConfig, CategoryRegistry]: The validated configuration

    Raises:
        InvalidConfigError: if the connection or any category is invalid
    """
    settings = get_settings()

    logger.info("Storage configuration check started", extra={"event_type": "config_check_start"})

    storage_config = storage_config_from_settings()
    storage_config.validate_config()

    registry = load_category_registry(settings.STORAGE_CATEGORIES_FILE)

    logger.info(
        "Storage configuration check completed",
        extra={
            "event_type": "config_check_complete",
            "environment": settings.ENVIRONMENT,
            "endpoint": storage_config.endpoint,
            "categories": sorted(registry),
        },
    )

    return storage_config, registry


def main() -> int:
    settings = get_settings()

    if settings.ENVIRONMENT in ["staging", "production"]:
        setup_logging(config_override=get_logging_config())
    else:
        setup_logging()
    setup_exception_logging()

    try:
        bootstrap()
    except InvalidConfigError as exc:
        logger.error(
            "Storage configuration is invalid: %s",
            exc.message,
            extra={"event_type": "config_check_failed", "error_code": exc.code},
        )
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
