class PollingError(Exception):
    """Raised when the ingestion API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ClientTimeout(Exception):
    """Raised when a session is still running after the last allowed poll.

    The session itself keeps running on the server; only the local wait ends.
    """

    def __init__(self, session_id: str, attempts: int) -> None:
        super().__init__(
            f"Session {session_id} did not finish after {attempts} status checks"
        )
        self.session_id = session_id
        self.attempts = attempts
