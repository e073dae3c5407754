from enum import StrEnum
from functools import lru_cache

from src.core.settings.base import Settings as BaseSettings
from src.core.settings.local import Settings as LocalSettings
from src.core.settings.production import Settings as ProductionSettings
from src.core.settings.staging import Settings as StagingSettings


class Environment(StrEnum):
    LOCAL = "local"
    STAGING = "staging"
    PRODUCTION = "production"


SETTINGS_BY_ENVIRONMENT: dict[Environment, type[BaseSettings]] = {
    Environment.LOCAL: LocalSettings,
    Environment.STAGING: StagingSettings,
    Environment.PRODUCTION: ProductionSettings,
}


@lru_cache
def get_settings() -> BaseSettings:
    """
    Returns the settings class matching the ENVIRONMENT variable.

    Settings are built on first use, so importing a module never validates
    the environment.

    Returns:
        BaseSettings: The settings for the active environment

    Raises:
        ValueError: If an invalid environment is specified
    """

    raw_environment = BaseSettings().ENVIRONMENT.lower()

    try:
        environment = Environment(raw_environment)
    except ValueError:
        raise ValueError(
            f"Invalid environment: {raw_environment}. "
            f"Must be one of {', '.join(env.value for env in Environment)}"
        ) from None

    return SETTINGS_BY_ENVIRONMENT[environment]()

