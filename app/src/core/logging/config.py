import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from src.core.config import get_settings


def get_logging_config() -> Dict[str, Any]:
    """
    Build the logging configuration dictionary for the current environment.

    Local runs get readable console output plus a detailed formatter for
    errors; every other environment writes production JSON to stdout/stderr.

    Returns:
        Dictionary accepted by ``logging.config.dictConfig``
    """
    settings = get_settings()
    is_local = settings.ENVIRONMENT == "local"
    app_level = settings.LOG_LEVEL or ("DEBUG" if is_local else "INFO")

    config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "context_filter": {
                "()": "src.core.logging.filters.CombinedContextFilter",
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": [],
        },
    }

    if is_local:
        config["formatters"] = {
            "console": {
                "()": "src.core.logging.formatters.ConsoleFormatter",
            },
        }
        config["handlers"] = {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG",
                "formatter": "console",
                "filters": ["context_filter"],
                "stream": "ext://sys.stdout",
            },
        }
        config["root"]["handlers"] = ["console"]
    else:
        config["formatters"] = {
            "production": {
                "()": "src.core.logging.formatters.ProductionFormatter",
            },
        }
        config["handlers"] = {
            "json_stdout": {
                "class": "logging.StreamHandler",
                "level": "INFO",
                "formatter": "production",
                "filters": ["context_filter"],
                "stream": "ext://sys.stdout",
            },
            "error_stderr": {
                "class": "logging.StreamHandler",
                "level": "ERROR",
                "formatter": "production",
                "filters": ["context_filter"],
                "stream": "ext://sys.stderr",
            },
        }
        config["root"]["handlers"] = ["json_stdout", "error_stderr"]

    config["loggers"] = {
        "src": {
            "level": app_level,
            "handlers": config["root"]["handlers"],
            "propagate": False,
        },
        "pydantic": {
            "level": "WARNING",
            "propagate": True,
        },
    }

    return config


def load_config_from_yaml(config_path: Path) -> Optional[Dict[str, Any]]:
    """
    Load logging configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dictionary containing the logging configuration, or None if file doesn't exist
    """
    if not config_path.exists():
        return None

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"Failed to load logging config from {config_path}: {e}", file=sys.stderr)
        return None


def setup_logging(config_override: Optional[Dict[str, Any]] = None) -> None:
    """
    Configure logging for the process.

    The first available source wins:
    1. ``config_override``
    2. ``config/logging.<environment>.yaml`` then ``config/logging.yaml``
    3. ``get_logging_config()``

    Args:
        config_override: Optional dictionary to use instead of the defaults
    """
    config = config_override

    if config is None:
        settings = get_settings()
        config_dir = Path(settings.CONFIG_DIR)
        config = load_config_from_yaml(config_dir / f"logging.{settings.ENVIRONMENT}.yaml")

        if config is None:
            config = load_config_from_yaml(config_dir / "logging.yaml")

    if config is None:
        config = get_logging_config()

    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        print(f"Failed to configure logging: {e}", file=sys.stderr)
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)],
        )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: The logger name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
