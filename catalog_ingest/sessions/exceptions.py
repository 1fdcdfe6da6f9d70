class SessionError(Exception):
    """Base exception for session store errors."""


class SessionNotFoundError(SessionError):
    """Raised when a session id does not exist."""


class InvalidTransitionError(SessionError):
    """Raised when a status change would move a session backwards or out of a terminal state."""


class SessionOwnershipLostError(SessionError):
    """Raised when a running session was moved on by another writer (e.g. the stale sweep)."""
