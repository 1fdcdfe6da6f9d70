class ValidationError(Exception):
    """Raised synchronously when an upload is rejected. No session exists afterwards."""

    status_code = 400


class UnsupportedMediaTypeError(ValidationError):
    status_code = 415


class FileTooLargeError(ValidationError):
    status_code = 413
