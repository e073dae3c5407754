from .base import ConflictError, NotFoundError, ServiceError  # noqa: F401

__all__ = [
    "ConflictError",
    "NotFoundError",
    "ServiceError",
]
