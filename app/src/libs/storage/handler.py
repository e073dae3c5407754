from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar

from pydantic import Field, SerializerFunctionWrapHandler, field_serializer, field_validator
from src.libs.storage.category import CategoryConfig, PreviewConfig
from src.libs.storage.enums import MiddlewareType
from src.libs.storage.exceptions import CategoryNotFoundError, InvalidConfigError
from src.libs.storage.schemas import ConfigModel
from src.libs.storage.security import SecurityConfig

DEFAULT_THUMBNAIL_SIZES = ("150x150", "300x300", "600x600")
DEFAULT_PREVIEW_FORMATS = ("image", "pdf")
DEFAULT_PRESIGNED_URL_EXPIRY = 24 * 60 * 60  # 24 hours
DEFAULT_MAX_DOWNLOAD_COUNT = 100


class HandlerConfig(ConfigModel):
    """
    Configuration of a storage handler serving a set of categories.

    Each category is stored in the bucket ``<base_path>-<bucket_suffix>``.
    Handler level middlewares, security and preview settings apply to every
    category that does not override them.

    Attributes:
        base_path (str): Prefix of every bucket served by the handler.
        middlewares (tuple[str, ...]): Default middlewares for all categories.
        categories (Mapping[str, CategoryConfig]): Categories by name, read-only.
        security (SecurityConfig): Default access policy.
        preview (PreviewConfig): Default preview settings.
    """

    always_emit: ClassVar[frozenset[str]] = frozenset({"base_path", "middlewares", "categories"})

    base_path: str = ""
    middlewares: tuple[str, ...] = ()
    categories: Mapping[str, CategoryConfig] = Field(default_factory=dict, validate_default=True)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)

    @field_validator("categories", mode="after")
    @classmethod
    def _freeze_categories(cls, categories: Mapping[str, CategoryConfig]) -> Mapping[str, CategoryConfig]:
        return MappingProxyType(dict(categories))

    @field_serializer("categories", mode="wrap")
    def _serialize_categories(
        self, categories: Mapping[str, CategoryConfig], handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        return handler(dict(categories))

    def validate_config(self) -> None:
        """
        Check the handler and every category it serves.

        Raises:
            InvalidConfigError: naming the offending field or category
        """
        if not self.base_path:
            raise InvalidConfigError("BasePath is required")
        if not self.categories:
            raise InvalidConfigError("At least one category must be defined")

        for name, category in self.categories.items():
            try:
                category.validate_config()
            except InvalidConfigError as e:
                raise InvalidConfigError(f"Category {name} is invalid: {e.message}") from e

    def category(self, name: str) -> CategoryConfig:
        try:
            return self.categories[name]
        except KeyError:
            raise CategoryNotFoundError(f"Category {name} not found") from None

    def bucket_name(self, category: str) -> str:
        """
        Name of the bucket holding a category's objects.

        Unknown categories use their own name as suffix.
        """
        config = self.categories.get(category)
        suffix = config.bucket_suffix if config is not None else category
        return f"{self.base_path}-{suffix}"

    def is_public_bucket(self, bucket_name: str) -> bool:
        for config in self.categories.values():
            if f"{self.base_path}-{config.bucket_suffix}" == bucket_name:
                return config.is_public
        return False

    def middleware_chain(self, category: str) -> tuple[MiddlewareType, ...]:
        """
        Middlewares applied to a category, in configuration order.

        The category list wins when non-empty, otherwise the handler defaults apply.

        Raises:
            CategoryNotFoundError: if the category is not configured
            InvalidConfigError: if a middleware name is unknown
        """
        names = self.category(category).middlewares or self.middlewares

        chain = []
        for name in names:
            try:
                chain.append(MiddlewareType(name))
            except ValueError:
                raise InvalidConfigError(f"unknown middleware: {name}") from None
        return tuple(chain)

    def security_policy(self, category: str) -> SecurityConfig:
        """Access policy for a category; the handler policy applies when the category restricts nothing."""
        security = self.category(category).security
        return security if security.is_restricted else self.security

    def encryption_policy(self, category: str) -> SecurityConfig:
        security = self.category(category).security
        return security if security.encrypt_at_rest else self.security

    def thumbnail_settings(self, category: str) -> PreviewConfig:
        preview = self.category(category).preview
        return preview if preview.generate_thumbnails else self.preview

    def cdn_settings(self, category: str) -> PreviewConfig:
        preview = self.category(category).preview
        return preview if preview.use_cdn else self.preview


def default_handler_config(base_path: str) -> HandlerConfig:
    return HandlerConfig(
        base_path=base_path,
        categories={},
        security=SecurityConfig(
            require_auth=True,
            presigned_url_expiry=DEFAULT_PRESIGNED_URL_EXPIRY,
            max_download_count=DEFAULT_MAX_DOWNLOAD_COUNT,
        ),
        preview=PreviewConfig(
            generate_thumbnails=True,
            thumbnail_sizes=DEFAULT_THUMBNAIL_SIZES,
            enable_preview=True,
            preview_formats=DEFAULT_PREVIEW_FORMATS,
        ),
    )
