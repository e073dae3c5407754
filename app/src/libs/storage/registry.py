from collections.abc import Iterator, Mapping
from types import MappingProxyType

from src.core.logging import get_logger
from src.libs.storage.category import CategoryConfig
from src.libs.storage.exceptions import CategoryExistsError, CategoryNotFoundError, InvalidConfigError
from src.libs.storage.handler import HandlerConfig

logger = get_logger(__name__)


class CategoryRegistry(Mapping[str, CategoryConfig]):
    """
    Read-only mapping of category name to its configuration.

    Built once at startup and handed to whatever needs to look categories up.
    Every category is validated on construction, so a registry only ever
    holds usable categories. ``with_category`` returns a new registry
    instead of modifying this one.
    """

    def __init__(self, categories: Mapping[str, CategoryConfig] | None = None) -> None:
        validated: dict[str, CategoryConfig] = {}

        for name, config in (categories or {}).items():
            try:
                config.validate_config()
            except InvalidConfigError as e:
                logger.warning(
                    "Rejected category %s: %s",
                    name,
                    e.message,
                    extra={"category": name, "error_code": e.code},
                )
                raise InvalidConfigError(f"Category {name} is invalid: {e.message}") from e
            validated[name] = config

        self._categories = MappingProxyType(validated)

    @classmethod
    def from_handler_config(cls, handler_config: HandlerConfig) -> "CategoryRegistry":
        return cls(handler_config.categories)

    def __getitem__(self, name: str) -> CategoryConfig:
        return self._categories[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __repr__(self) -> str:
        return f"CategoryRegistry({sorted(self._categories)!r})"

    def lookup(self, name: str) -> CategoryConfig:
        """
        Get a category by name.

        Raises:
            CategoryNotFoundError: if no category has that name
        """
        try:
            return self._categories[name]
        except KeyError:
            raise CategoryNotFoundError(f"Category {name} not found") from None

    def with_category(self, name: str, config: CategoryConfig) -> "CategoryRegistry":
        """
        Return a new registry that also holds ``name``.

        Raises:
            CategoryExistsError: if the name is already registered
            InvalidConfigError: if the category is invalid
        """
        if name in self._categories:
            raise CategoryExistsError(f"Category {name} already exists")

        registry = CategoryRegistry({**self._categories, name: config})
        logger.debug("Registered category %s", name, extra={"category": name})
        return registry

    def for_content_type(self, content_type: str) -> list[str]:
        """Names of the categories accepting uploads of ``content_type``."""
        return [name for name, config in self._categories.items() if config.accepts(content_type)]
