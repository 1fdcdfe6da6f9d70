from catalog_ingest.extraction.exceptions import ExtractionError


class DocumentReadError(ExtractionError):
    """Raised when an uploaded document is corrupted, empty, or otherwise unreadable."""

    code = "unparseable_document"


class SourceMissingError(DocumentReadError):
    """Raised when the stored upload referenced by a session is gone."""

    code = "source_missing"
