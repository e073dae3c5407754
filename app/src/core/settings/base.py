import warnings
from pathlib import Path
from typing import Literal, Self

from dotenv import load_dotenv
from pydantic import computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    BASE_DIR: str = str(Path(__file__).resolve().parent.parent.parent.parent)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def CONFIG_DIR(self) -> str:
        return str(Path(self.BASE_DIR) / "config")

    APP_NAME: str = "Bucket Storage"
    APP_DESCRIPTION: str = "Category configuration for bucket backed file storage"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None

    STORAGE_ENDPOINT: str = "localhost:9000"
    STORAGE_ACCESS_KEY: str = "minioadmin"
    STORAGE_SECRET_KEY: str = "minioadmin"
    STORAGE_USE_SSL: bool = False
    STORAGE_REGION: str = "us-east-1"
    STORAGE_BUCKET_NAME: str = "myapp-storage"
    STORAGE_MAX_FILE_SIZE: int = 25 * 1024 * 1024  # 25 MB
    STORAGE_UPLOAD_TIMEOUT: int = 300  # 5 minutes
    STORAGE_DOWNLOAD_TIMEOUT: int = 60  # 1 minute
    STORAGE_MAX_CONNECTIONS: int = 100
    STORAGE_CONNECTION_TIMEOUT: int = 30
    STORAGE_REQUEST_TIMEOUT: int = 60
    STORAGE_RETRY_ATTEMPTS: int = 3
    STORAGE_RETRY_DELAY: int = 100  # milliseconds
    STORAGE_CATEGORIES_FILE: str = str(Path(BASE_DIR) / "config" / "categories.yaml")

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        if value == "minioadmin":
            message = (
                f'The value of {var_name} is "minioadmin", ' "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT in ["local", "staging"]:
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("STORAGE_ACCESS_KEY", self.STORAGE_ACCESS_KEY)
        self._check_default_secret("STORAGE_SECRET_KEY", self.STORAGE_SECRET_KEY)

        return self

    @model_validator(mode="after")
    def _enforce_categories_file_suffix(self) -> Self:
        suffix = Path(self.STORAGE_CATEGORIES_FILE).suffix.lower()
        if suffix not in [".json", ".yaml", ".yml"]:
            raise ValueError(f"Unsupported categories file format: {self.STORAGE_CATEGORIES_FILE}")

        return self
