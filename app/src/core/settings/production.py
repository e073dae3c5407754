from typing import Literal

from .base import Settings as BaseSettings


class Settings(BaseSettings):
    """Settings to use in a production environment."""

    ENVIRONMENT: Literal["local", "staging", "production"] = "production"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = "INFO"
    STORAGE_USE_SSL: bool = True
    STORAGE_MAX_CONNECTIONS: int = 200
