from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer
from src.libs.storage.exceptions import InvalidConfigError


def is_empty(value: Any) -> bool:
    """
    Check whether a serialized value is the zero value of its type.

    None, False, 0, 0.0, "" and empty containers are zero values.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (str, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


class ConfigModel(BaseModel):
    """
    Base schema for declarative storage configuration records.

    Records are frozen after construction; derive variants with
    ``model_copy(update=...)``. On output, keys holding a zero value are
    omitted unless listed in ``always_emit``; on input, omitted keys fall
    back to their zero value and unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    always_emit: ClassVar[frozenset[str]] = frozenset()

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = self._pack(handler(self))
        return {key: value for key, value in data.items() if key in self.always_emit or not is_empty(value)}

    def _pack(self, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls.model_validate(data)

    @classmethod
    def from_json(cls, text: str | bytes) -> Self:
        return cls.model_validate_json(text)


class StorageConfig(ConfigModel):
    """
    Schema for the object storage connection shared by every category.

    Attributes:
        endpoint (str): Host and port of the object storage service.
        access_key (str): Access key for the service.
        secret_key (str): Secret key for the service.
        use_ssl (bool): Whether to connect over TLS.
        region (str): Region the buckets live in.
        bucket_name (str): Base bucket name.
        max_file_size (int): Global upload ceiling in bytes.
        upload_timeout (int): Upload timeout in seconds.
        download_timeout (int): Download timeout in seconds.
        max_connections (int): Maximum concurrent connections.
        connection_timeout (int): Connection timeout in seconds.
        request_timeout (int): Request timeout in seconds.
        retry_attempts (int): Number of retries for retryable failures.
        retry_delay (int): Delay between retries in milliseconds.
    """

    always_emit: ClassVar[frozenset[str]] = frozenset(
        {
            "endpoint",
            "access_key",
            "secret_key",
            "use_ssl",
            "region",
            "bucket_name",
            "max_file_size",
            "upload_timeout",
            "download_timeout",
            "max_connections",
            "connection_timeout",
            "request_timeout",
            "retry_attempts",
            "retry_delay",
        }
    )

    endpoint: str = ""
    access_key: str = ""
    secret_key: str = ""
    use_ssl: bool = False
    region: str = ""
    bucket_name: str = ""
    max_file_size: int = 0
    upload_timeout: int = 0
    download_timeout: int = 0

    max_connections: int = 0
    connection_timeout: int = 0
    request_timeout: int = 0
    retry_attempts: int = 0
    retry_delay: int = 0

    def validate_config(self) -> None:
        """
        Check the connection settings.

        Raises:
            InvalidConfigError: naming the first offending field
        """
        if not self.endpoint:
            raise InvalidConfigError("Endpoint is required")
        if not self.access_key:
            raise InvalidConfigError("AccessKey is required")
        if not self.secret_key:
            raise InvalidConfigError("SecretKey is required")
        if self.max_file_size <= 0:
            raise InvalidConfigError("MaxFileSize must be greater than 0")
        if self.max_connections <= 0:
            raise InvalidConfigError("MaxConnections must be greater than 0")
        if self.connection_timeout <= 0:
            raise InvalidConfigError("ConnectionTimeout must be greater than 0")
        if self.request_timeout <= 0:
            raise InvalidConfigError("RequestTimeout must be greater than 0")
        if self.retry_attempts < 0:
            raise InvalidConfigError("RetryAttempts must be non-negative")
        if self.retry_delay < 0:
            raise InvalidConfigError("RetryDelay must be non-negative")


def default_storage_config() -> StorageConfig:
    return StorageConfig(
        endpoint="localhost:9000",
        access_key="minioadmin",
        secret_key="minioadmin",
        use_ssl=False,
        region="us-east-1",
        bucket_name="myapp-storage",
        max_file_size=25 * 1024 * 1024,  # 25MB
        upload_timeout=300,  # 5 minutes
        download_timeout=60,  # 1 minute
        max_connections=100,
        connection_timeout=30,
        request_timeout=60,
        retry_attempts=3,
        retry_delay=100,  # 100ms
    )

