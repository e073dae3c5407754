from enum import StrEnum


class MediaFamily(StrEnum):
    """
    Enumeration of media families that carry type specific validation rules.

    Attributes:
        IMAGE: Raster images (jpeg, png, webp, ...).
        PDF: PDF documents.
        VIDEO: Video containers (mp4, webm, ...).
        AUDIO: Audio files (mp3, wav, flac, ...).
    """

    IMAGE = "image"
    PDF = "pdf"
    VIDEO = "video"
    AUDIO = "audio"


class MiddlewareType(StrEnum):
    """
    Enumeration of middlewares a category or handler may enable, in the
    order they are listed in the configuration.
    """

    SECURITY = "security"
    VALIDATION = "validation"
    THUMBNAIL = "thumbnail"
    ENCRYPTION = "encryption"
    AUDIT = "audit"
    CDN = "cdn"
    MEMORY = "memory"
    CACHE = "cache"
    MONITORING = "monitoring"
