"""Forward-only status transitions for processing sessions."""

from catalog_ingest.sessions.exceptions import InvalidTransitionError
from catalog_ingest.sessions.models import SessionStatus

ALLOWED_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.PENDING: frozenset({SessionStatus.EXTRACTING_TEXT}),
    SessionStatus.EXTRACTING_TEXT: frozenset(
        {SessionStatus.PROCESSING, SessionStatus.FAILED}
    ),
    SessionStatus.PROCESSING: frozenset(
        {SessionStatus.COMPLETED, SessionStatus.FAILED}
    ),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.FAILED: frozenset(),
}

# States a session may be failed from.
FAILABLE_STATES: frozenset[SessionStatus] = frozenset(
    {SessionStatus.EXTRACTING_TEXT, SessionStatus.PROCESSING}
)

_PROGRESS: dict[SessionStatus, int] = {
    SessionStatus.PENDING: 0,
    SessionStatus.EXTRACTING_TEXT: 15,
    SessionStatus.PROCESSING: 60,
    SessionStatus.COMPLETED: 100,
    SessionStatus.FAILED: 0,
}

_PHASES: dict[SessionStatus, str] = {
    SessionStatus.PENDING: "Waiting for processing",
    SessionStatus.EXTRACTING_TEXT: "Analyzing document",
    SessionStatus.PROCESSING: "Creating catalog entries",
    SessionStatus.COMPLETED: "Processing complete",
    SessionStatus.FAILED: "Processing failed",
}


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    """Return True if moving from current to target is a legal forward step."""
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: SessionStatus, target: SessionStatus) -> None:
    """Raise InvalidTransitionError unless current -> target is allowed."""
    if not can_transition(current, target):
        raise InvalidTransitionError(
            f"Illegal session transition {current.value} -> {target.value}"
        )


def progress_percentage(status: SessionStatus) -> int:
    return _PROGRESS[status]


def current_phase(status: SessionStatus) -> str:
    return _PHASES[status]
