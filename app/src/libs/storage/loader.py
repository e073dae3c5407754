import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from src.core.config import get_settings
from src.core.logging import add_to_log_context, get_logger, log_exception_with_context
from src.libs.storage.exceptions import ConfigLoadError, InvalidConfigError
from src.libs.storage.handler import HandlerConfig
from src.libs.storage.registry import CategoryRegistry
from src.libs.storage.schemas import StorageConfig

logger = get_logger(__name__)

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")


def read_config_document(path: Path) -> dict[str, Any]:
    """
    Read a JSON or YAML configuration document.

    Args:
        path: Location of the document; the suffix selects the format

    Returns:
        dict: The decoded top level mapping

    Raises:
        ConfigLoadError: if the file is missing, unreadable, malformed or not a mapping
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ConfigLoadError(
            f"Unsupported configuration format: {path.name}",
            context=f"supported suffixes: {', '.join(SUPPORTED_SUFFIXES)}",
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            if suffix == ".json":
                document = json.load(f)
            else:
                document = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigLoadError(f"Configuration file not found: {path}") from None
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Failed to parse configuration file: {path}", context=str(e)) from e

    if not isinstance(document, dict):
        raise ConfigLoadError(f"Configuration file must contain a mapping: {path}")

    return document


def load_handler_config(path: str | Path) -> HandlerConfig:
    """
    Load and validate a handler configuration document.

    Args:
        path: JSON or YAML file describing the handler and its categories

    Returns:
        HandlerConfig: The validated configuration

    Raises:
        ConfigLoadError: if the document cannot be read or decoded
        InvalidConfigError: if the decoded configuration is invalid
    """
    path = Path(path)

    with add_to_log_context(config_file=str(path)):
        try:
            document = read_config_document(path)
            try:
                config = HandlerConfig.model_validate(document)
            except ValidationError as e:
                raise ConfigLoadError(f"Invalid handler configuration in {path}", context=str(e)) from e

            config.validate_config()
        except InvalidConfigError as e:
            log_exception_with_context(e, message="Failed to load storage categories", level=logging.ERROR)
            raise

        logger.info(
            "Loaded %d storage categories from %s",
            len(config.categories),
            path,
            extra={"categories": sorted(config.categories)},
        )

    return config


def load_category_registry(path: str | Path | None = None) -> CategoryRegistry:
    """
    Load the category registry, by default from ``STORAGE_CATEGORIES_FILE``.
    """
    return CategoryRegistry.from_handler_config(load_handler_config(path or get_settings().STORAGE_CATEGORIES_FILE))


def storage_config_from_settings() -> StorageConfig:
    """
    Build the connection config from the application settings.

    Returns:
        StorageConfig: The configured connection, not yet validated
    """
    settings = get_settings()

    return StorageConfig(
        endpoint=settings.STORAGE_ENDPOINT,
        access_key=settings.STORAGE_ACCESS_KEY,
        secret_key=settings.STORAGE_SECRET_KEY,
        use_ssl=settings.STORAGE_USE_SSL,
        region=settings.STORAGE_REGION,
        bucket_name=settings.STORAGE_BUCKET_NAME,
        max_file_size=settings.STORAGE_MAX_FILE_SIZE,
        upload_timeout=settings.STORAGE_UPLOAD_TIMEOUT,
        download_timeout=settings.STORAGE_DOWNLOAD_TIMEOUT,
        max_connections=settings.STORAGE_MAX_CONNECTIONS,
        connection_timeout=settings.STORAGE_CONNECTION_TIMEOUT,
        request_timeout=settings.STORAGE_REQUEST_TIMEOUT,
        retry_attempts=settings.STORAGE_RETRY_ATTEMPTS,
        retry_delay=settings.STORAGE_RETRY_DELAY,
    )
