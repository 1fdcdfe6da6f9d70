from catalog_ingest.documents import media_types
from catalog_ingest.gateway.exceptions import (
    FileTooLargeError,
    UnsupportedMediaTypeError,
    ValidationError,
)


def validate_upload(declared_media_type: str | None, size_bytes: int, max_bytes: int) -> str:
    """Check an upload against the media type whitelist and size ceiling.

    Returns:
        The canonical media type.

    Raises:
        ValidationError: if the file is empty, oversize, or of an unsupported type.
    """
    media_type = media_types.canonical_media_type(declared_media_type)
    if media_type not in media_types.SUPPORTED_MEDIA_TYPES:
        raise UnsupportedMediaTypeError(
            f"Unsupported file type '{declared_media_type or 'unknown'}'. "
            "Use PDF, JPEG, PNG, XLSX or CSV."
        )
    if size_bytes <= 0:
        raise ValidationError("File is empty.")
    if size_bytes > max_bytes:
        raise FileTooLargeError(
            f"File too large. Maximum size: {max_bytes // (1024 * 1024)} MiB."
        )
    return media_type
