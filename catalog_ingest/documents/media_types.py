PDF = "application/pdf"
JPEG = "image/jpeg"
PNG = "image/png"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV = "text/csv"

SUPPORTED_MEDIA_TYPES: frozenset[str] = frozenset({PDF, JPEG, PNG, XLSX, CSV})

# Non-canonical names some browsers send.
_ALIASES: dict[str, str] = {
    "image/jpg": JPEG,
    "image/pjpeg": JPEG,
}

FILE_EXTENSIONS: dict[str, str] = {
    PDF: ".pdf",
    JPEG: ".jpg",
    PNG: ".png",
    XLSX: ".xlsx",
    CSV: ".csv",
}


def canonical_media_type(declared: str | None) -> str:
    """Lowercase, drop parameters such as '; charset=utf-8', resolve aliases."""
    if not declared:
        return ""
    base = declared.split(";", 1)[0].strip().lower()
    return _ALIASES.get(base, base)
