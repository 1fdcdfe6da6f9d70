class ExtractionError(Exception):
    """Raised when a document cannot be turned into a draft catalog."""

    code = "extraction_failed"


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""

    code = "extraction_service_error"


class ExtractionTimeoutError(ExtractionNetworkError):
    """Raised when the AI provider does not answer within the configured timeout."""

    code = "extraction_timeout"


class DraftValidationError(ExtractionError):
    """Raised when the AI response does not describe a valid draft catalog."""

    code = "invalid_draft"
