from typing import Literal

from .base import Settings as BaseSettings


class Settings(BaseSettings):
    """Settings to use on a developer machine."""

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = "DEBUG"
