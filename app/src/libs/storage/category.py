"""
Per category upload rules.

A category (e.g. profile images, documents) maps onto its own bucket and
declares size ceilings, allowed MIME types, an optional media specific
validation block, preview settings and security overrides. Categories are
built once at startup, checked with ``CategoryConfig.validate_config`` and
only read afterwards.
"""

from typing import Any, ClassVar

from pydantic import Field, model_validator
from src.libs.storage.enums import MediaFamily
from src.libs.storage.exceptions import FileTooLargeError, InvalidConfigError, InvalidFileError, UnsupportedTypeError
from src.libs.storage.schemas import ConfigModel
from src.libs.storage.security import SecurityConfig
from src.libs.storage.utils import file_extension, media_family, normalize_mime_type, parse_size_spec

DEFAULT_MIN_FILE_SIZE = 1024  # 1KB


class ImageValidationConfig(ConfigModel):
    """Rules for image uploads. Quality bounds use a 1-100 scale."""

    family: ClassVar[MediaFamily] = MediaFamily.IMAGE
    wire_key: ClassVar[str] = "image_validation"

    min_width: int = 0
    max_width: int = 0
    min_height: int = 0
    max_height: int = 0

    min_quality: int = 0
    max_quality: int = 0

    allowed_formats: tuple[str, ...] = ()  # ("jpeg", "png", "webp")

    min_aspect_ratio: float = 0.0
    max_aspect_ratio: float = 0.0

    allowed_color_spaces: tuple[str, ...] = ()  # ("RGB", "RGBA", "GRAY")


class PDFValidationConfig(ConfigModel):
    """Rules for PDF uploads."""

    family: ClassVar[MediaFamily] = MediaFamily.PDF
    wire_key: ClassVar[str] = "pdf_validation"

    validate_structure: bool = False

    min_pages: int = 0
    max_pages: int = 0

    require_metadata: bool = False
    required_fields: tuple[str, ...] = ()  # ("title", "author")

    allow_password: bool = False
    allow_scripts: bool = False


class VideoValidationConfig(ConfigModel):
    """Rules for video uploads. Durations are in seconds."""

    family: ClassVar[MediaFamily] = MediaFamily.VIDEO
    wire_key: ClassVar[str] = "video_validation"

    min_duration: int = 0
    max_duration: int = 0

    min_width: int = 0
    max_width: int = 0
    min_height: int = 0
    max_height: int = 0

    allowed_codecs: tuple[str, ...] = ()  # ("h264", "h265", "vp9")

    min_frame_rate: int = 0
    max_frame_rate: int = 0


class AudioValidationConfig(ConfigModel):
    """Rules for audio uploads. Durations in seconds, bitrates in kbps, sample rates in Hz."""

    family: ClassVar[MediaFamily] = MediaFamily.AUDIO
    wire_key: ClassVar[str] = "audio_validation"

    min_duration: int = 0
    max_duration: int = 0

    min_bitrate: int = 0
    max_bitrate: int = 0

    allowed_formats: tuple[str, ...] = ()  # ("mp3", "wav", "aac", "flac")

    min_sample_rate: int = 0
    max_sample_rate: int = 0


MediaValidation = ImageValidationConfig | PDFValidationConfig | VideoValidationConfig | AudioValidationConfig

MEDIA_VALIDATION_BLOCKS: dict[str, type[MediaValidation]] = {
    block.wire_key: block
    for block in (ImageValidationConfig, PDFValidationConfig, VideoValidationConfig, AudioValidationConfig)
}


class ValidationConfig(ConfigModel):
    """
    Basic upload rules plus at most one media specific block.

    On the wire the media block appears under ``image_validation``,
    ``pdf_validation``, ``video_validation`` or ``audio_validation``; in
    Python it is held in ``media`` and its class tells which family it
    governs.
    """

    always_emit: ClassVar[frozenset[str]] = frozenset(MEDIA_VALIDATION_BLOCKS)

    max_file_size: int = 0
    min_file_size: int = 0
    allowed_types: tuple[str, ...] = ()
    allowed_extensions: tuple[str, ...] = ()

    media: MediaValidation | None = None

    @model_validator(mode="before")
    @classmethod
    def _unpack_media_block(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        blocks = {key: data.pop(key) for key in MEDIA_VALIDATION_BLOCKS if key in data}
        blocks = {key: value for key, value in blocks.items() if value is not None}

        media = data.get("media")
        if media is not None:
            if not isinstance(media, tuple(MEDIA_VALIDATION_BLOCKS.values())):
                raise ValueError(
                    "media must be a validation block instance, "
                    f"use one of {', '.join(MEDIA_VALIDATION_BLOCKS)} for raw data"
                )
            blocks["media"] = media

        if len(blocks) > 1:
            raise ValueError(f"At most one media validation block may be set, got: {', '.join(sorted(blocks))}")

        for key, value in blocks.items():
            if key != "media":
                data["media"] = MEDIA_VALIDATION_BLOCKS[key].model_validate(value)

        return data

    def _pack(self, data: dict[str, Any]) -> dict[str, Any]:
        media = data.pop("media", None)
        if self.media is not None:
            data[self.media.wire_key] = media
        return data

    def media_rule_for(self, content_type: str) -> MediaValidation | None:
        """
        Return the media block governing uploads of ``content_type``.

        The block only applies when its family matches the family of the
        content type; otherwise, or when no block is set, None is returned.
        """
        if self.media is None:
            return None
        if media_family(content_type) is not self.media.family:
            return None
        return self.media

    def check_upload(self, file_name: str, file_size: int, content_type: str) -> MediaValidation | None:
        """
        Check an upload's declared size, type and extension against the basic rules.

        Args:
            file_name: The original file name
            file_size: The upload size in bytes
            content_type: The declared MIME type

        Returns:
            MediaValidation | None: The media block to run against the file bytes, if any

        Raises:
            FileTooLargeError: if the size exceeds max_file_size
            InvalidFileError: if the size is below min_file_size
            UnsupportedTypeError: if the content type or extension is not allowed
        """
        if self.max_file_size > 0 and file_size > self.max_file_size:
            raise FileTooLargeError(
                f"file size {file_size} exceeds maximum allowed size {self.max_file_size}",
            )

        if self.min_file_size > 0 and file_size < self.min_file_size:
            raise InvalidFileError(
                f"file size {file_size} is below minimum required size {self.min_file_size}",
            )

        mime_type = normalize_mime_type(content_type)
        if self.allowed_types and mime_type not in {normalize_mime_type(t) for t in self.allowed_types}:
            raise UnsupportedTypeError(
                f"content type {content_type} is not allowed",
                context=f"allowed types: {', '.join(self.allowed_types)}",
            )

        extension = file_extension(file_name)
        allowed_extensions = {"." + ext.lower().lstrip(".") for ext in self.allowed_extensions}
        if allowed_extensions and extension not in allowed_extensions:
            raise UnsupportedTypeError(
                f"file extension {extension or '(none)'} is not allowed",
                context=f"allowed extensions: {', '.join(self.allowed_extensions)}",
            )

        return self.media_rule_for(mime_type)


class PreviewConfig(ConfigModel):
    """
    Thumbnail, preview and CDN settings.

    Attributes:
        generate_thumbnails (bool): Generate thumbnails on upload.
        thumbnail_sizes (tuple[str, ...]): Requested sizes as "WxH", e.g. "150x150".
        enable_preview (bool): Serve previews.
        preview_formats (tuple[str, ...]): Media kinds that get previews, e.g. "image", "pdf".
        use_cdn (bool): Serve through a CDN.
        cdn_endpoint (str): Base URL of the CDN.
    """

    generate_thumbnails: bool = False
    thumbnail_sizes: tuple[str, ...] = ()

    enable_preview: bool = False
    preview_formats: tuple[str, ...] = ()

    use_cdn: bool = False
    cdn_endpoint: str = ""

    def thumbnail_dimensions(self) -> list[tuple[int, int]]:
        """
        Parse ``thumbnail_sizes`` into (width, height) pairs.

        Raises:
            InvalidConfigError: if a size is not of the form "WxH"
        """
        try:
            return [parse_size_spec(size) for size in self.thumbnail_sizes]
        except ValueError as e:
            raise InvalidConfigError(str(e)) from e


class CategoryConfig(ConfigModel):
    """
    Rules for one upload category.

    Attributes:
        bucket_suffix (str): Appended to the handler base path to name the bucket.
        is_public (bool): Objects are publicly readable.
        max_size (int): Upload ceiling in bytes.
        allowed_types (tuple[str, ...]): Accepted MIME types, empty for any.
        validation (ValidationConfig): Basic and media specific rules.
        middlewares (tuple[str, ...]): Middlewares for this category; overrides
            the handler defaults when non-empty.
        security (SecurityConfig): Category specific access policy.
        preview (PreviewConfig): Category specific preview settings.
    """

    always_emit: ClassVar[frozenset[str]] = frozenset({"bucket_suffix", "is_public", "max_size", "allowed_types"})

    bucket_suffix: str = ""
    is_public: bool = False
    max_size: int = 0
    allowed_types: tuple[str, ...] = ()

    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    middlewares: tuple[str, ...] = ()

    security: SecurityConfig = Field(default_factory=SecurityConfig)

    preview: PreviewConfig = Field(default_factory=PreviewConfig)

    def validate_config(self) -> None:
        """
        Check the required fields of the category.

        Only the bucket suffix and the size ceiling are checked; bound
        ordering and quality ranges are left to the validation stage that
        consumes the rules.

        Raises:
            InvalidConfigError: if bucket_suffix is empty or max_size is not positive
        """
        if not self.bucket_suffix:
            raise InvalidConfigError("BucketSuffix is required")
        if self.max_size <= 0:
            raise InvalidConfigError("MaxSize must be greater than 0")

    def accepts(self, content_type: str) -> bool:
        if not self.allowed_types:
            return True
        return normalize_mime_type(content_type) in {normalize_mime_type(t) for t in self.allowed_types}


def default_category_config(bucket_suffix: str, is_public: bool, max_size: int) -> CategoryConfig:
    """
    Build a category with sensible defaults.

    Private categories require both authentication and ownership, public
    ones require neither. The arguments are not validated.

    Args:
        bucket_suffix: Suffix for the category bucket
        is_public: Whether objects are publicly readable
        max_size: Upload ceiling in bytes

    Returns:
        CategoryConfig: The category, with thumbnails and previews disabled
    """
    return CategoryConfig(
        bucket_suffix=bucket_suffix,
        is_public=is_public,
        max_size=max_size,
        allowed_types=(),
        validation=ValidationConfig(
            max_file_size=max_size,
            min_file_size=DEFAULT_MIN_FILE_SIZE,
        ),
        security=SecurityConfig(
            require_auth=not is_public,
            require_owner=not is_public,
        ),
        preview=PreviewConfig(
            generate_thumbnails=False,
            enable_preview=False,
        ),
    )
