from pathlib import PurePosixPath

from src.libs.storage.enums import MediaFamily

IMAGE_MIME_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/bmp",
        "image/tiff",
    }
)

PDF_MIME_TYPES = frozenset({"application/pdf"})

VIDEO_MIME_TYPES = frozenset(
    {
        "video/mp4",
        "video/webm",
        "video/avi",
        "video/mov",
        "video/wmv",
        "video/flv",
        "video/3gp",
        "video/quicktime",
    }
)

AUDIO_MIME_TYPES = frozenset(
    {
        "audio/mpeg",
        "audio/mp3",
        "audio/wav",
        "audio/ogg",
        "audio/aac",
        "audio/flac",
        "audio/m4a",
    }
)

MIME_TYPES_BY_FAMILY: dict[MediaFamily, frozenset[str]] = {
    MediaFamily.IMAGE: IMAGE_MIME_TYPES,
    MediaFamily.PDF: PDF_MIME_TYPES,
    MediaFamily.VIDEO: VIDEO_MIME_TYPES,
    MediaFamily.AUDIO: AUDIO_MIME_TYPES,
}


def normalize_mime_type(content_type: str) -> str:
    """
    Strip parameters and case from a content type.

    ``"Image/JPEG; charset=binary"`` becomes ``"image/jpeg"``.
    """
    return content_type.split(";", 1)[0].strip().lower()


def media_family(content_type: str) -> MediaFamily | None:
    """
    Classify a MIME type into the media family whose rules apply to it.

    Args:
        content_type: The MIME type to classify

    Returns:
        MediaFamily | None: The family, or None for types without media rules
    """
    mime_type = normalize_mime_type(content_type)
    for family, mime_types in MIME_TYPES_BY_FAMILY.items():
        if mime_type in mime_types:
            return family
    return None


def file_extension(file_name: str) -> str:
    """
    Return the lower cased extension of a file name including the leading dot,
    or an empty string when there is none.
    """
    return PurePosixPath(file_name).suffix.lower()


def parse_size_spec(size: str) -> tuple[int, int]:
    """
    Parse a ``"WxH"`` size specification such as ``"150x150"``.

    Raises:
        ValueError: if the specification is malformed or not positive
    """
    width, sep, height = size.strip().lower().partition("x")
    if not sep or not width.isdigit() or not height.isdigit():
        raise ValueError(f"Invalid size specification: {size!r}, expected 'WxH'")

    dimensions = int(width), int(height)
    if min(dimensions) <= 0:
        raise ValueError(f"Invalid size specification: {size!r}, dimensions must be positive")
    return dimensions
