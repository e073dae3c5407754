from .category import (  # noqa: F401
    AudioValidationConfig,
    CategoryConfig,
    ImageValidationConfig,
    MediaValidation,
    PDFValidationConfig,
    PreviewConfig,
    ValidationConfig,
    VideoValidationConfig,
    default_category_config,
)
from .enums import MediaFamily, MiddlewareType  # noqa: F401
from .exceptions import (  # noqa: F401
    CategoryExistsError,
    CategoryNotFoundError,
    ConfigLoadError,
    FileTooLargeError,
    InvalidConfigError,
    InvalidFileError,
    StorageError,
    UnsupportedTypeError,
)
from .handler import HandlerConfig, default_handler_config  # noqa: F401
from .loader import load_category_registry, load_handler_config, storage_config_from_settings  # noqa: F401
from .registry import CategoryRegistry  # noqa: F401
from .schemas import StorageConfig, default_storage_config  # noqa: F401
from .security import SecurityConfig  # noqa: F401
