from typing import Any

from fastapi import status
from src.core.exceptions import errors


class StorageError(errors.ServiceError):
    """
    Base error for storage related issues.

    Every storage error carries a stable ``code`` that callers can match on
    and a human readable ``message``; ``context`` holds optional details.
    """

    type_ = "storage_error"
    title = "Storage Error"
    detail = "An error occurred in the storage service."
    status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_ERROR"

    def __init__(self, message: str | None = None, context: str | None = None, **kwargs):
        super().__init__(detail=message, **kwargs)
        self.message = message or self.detail
        self.context = context

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        data = {"code": self.code, "message": self.message}
        if self.context:
            data["details"] = self.context
        return data


class InvalidConfigError(StorageError):
    """Raised when a storage, handler or category configuration is invalid."""

    type_ = "invalid_config"
    title = "Invalid Storage Configuration"
    detail = "The storage configuration is invalid."
    code = "INVALID_CONFIG"


class ConfigLoadError(InvalidConfigError):
    """Raised when a configuration document cannot be read or decoded."""

    type_ = "config_load_failed"
    title = "Configuration Load Error"
    detail = "The configuration document could not be loaded."
    code = "CONFIG_LOAD_FAILED"


class CategoryNotFoundError(StorageError, errors.NotFoundError):
    """Raised when a category name is not registered."""

    type_ = "category_not_found"
    title = "Category Not Found"
    detail = "The requested upload category does not exist."
    status = status.HTTP_404_NOT_FOUND
    code = "CATEGORY_NOT_FOUND"


class CategoryExistsError(StorageError, errors.ConflictError):
    """Raised when a category name is registered twice."""

    type_ = "category_exists"
    title = "Category Already Exists"
    detail = "The upload category is already registered."
    status = status.HTTP_409_CONFLICT
    code = "CATEGORY_EXISTS"


class InvalidFileError(StorageError):
    """Raised when an upload does not satisfy the category rules."""

    type_ = "invalid_file"
    title = "Invalid File"
    detail = "The uploaded file is invalid."
    status = status.HTTP_400_BAD_REQUEST
    code = "INVALID_FILE"


class FileTooLargeError(InvalidFileError):
    """Raised when an upload exceeds the category size ceiling."""

    type_ = "file_too_large"
    title = "File Too Large"
    detail = "The uploaded file is too large."
    code = "FILE_TOO_LARGE"


class UnsupportedTypeError(InvalidFileError):
    """Raised when an upload's content type or extension is not allowed."""

    type_ = "unsupported_type"
    title = "Unsupported File Type"
    detail = "The file type is not supported."
    status = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    code = "UNSUPPORTED_TYPE"
