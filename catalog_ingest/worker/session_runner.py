from catalog_ingest.database.models import SessionRecord
from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.extraction.exceptions import ExtractionError
from catalog_ingest.logging.logger import Log
from catalog_ingest.materializer.exceptions import MaterializationError
from catalog_ingest.processor.processor import Processor
from catalog_ingest.sessions.exceptions import SessionOwnershipLostError
from catalog_ingest.sessions.models import FailureReason, ResultSummary

INTERNAL_ERROR_CODE = "internal_error"


class SessionRunner:
    """Run one session to a terminal status and record the outcome.

    Sessions are never retried: any failure moves them to FAILED with a
    reason the status endpoint can show.
    """

    def __init__(self, processor: Processor, session_repo: SessionRepository) -> None:
        self._processor = processor
        self._session_repo = session_repo

    def run(self, session_id: str) -> None:
        """Claim a PENDING session and run it. No-op if it is already claimed."""
        try:
            session = self._session_repo.claim(session_id)
        except Exception as exc:
            Log.error(f"Could not claim session {session_id}: {exc}")
            return
        if session is None:
            Log.info(f"Session {session_id} is not pending, skipping")
            return
        self.run_claimed(session)

    def run_claimed(self, session: SessionRecord) -> None:
        """Execute a session already moved to EXTRACTING_TEXT by this caller."""
        Log.info(f"Running session {session.id} ({session.original_filename})")
        try:
            context = self._processor.process(session)
        except SessionOwnershipLostError as exc:
            Log.warning(str(exc))
            return
        except MaterializationError as exc:
            self._fail(session, FailureReason(exc.code, str(exc)), exc.partial_summary)
            return
        except ExtractionError as exc:
            self._fail(session, FailureReason(exc.code, str(exc)))
            return
        except Exception as exc:
            Log.exception(f"Unexpected error in session {session.id}")
            self._fail(session, FailureReason(INTERNAL_ERROR_CODE, f"Internal error: {exc}"))
            return

        if context.summary is None:
            self._fail(
                session,
                FailureReason(INTERNAL_ERROR_CODE, "Processing finished without a result"),
            )
            return
        if self._session_repo.complete(session.id, context.summary):
            Log.info(
                f"Session {session.id} completed: "
                f"{context.summary.products_created} products created"
            )
        else:
            self._keep_late_summary(session, context.summary)

    def _fail(
        self,
        session: SessionRecord,
        reason: FailureReason,
        partial_summary: ResultSummary | None = None,
    ) -> None:
        Log.error(f"Session {session.id} failed [{reason.code}]: {reason.message}")
        try:
            applied = self._session_repo.fail(session.id, reason, partial_summary)
        except Exception as exc:
            Log.error(f"Could not record failure of session {session.id}: {exc}")
            return
        if not applied:
            Log.warning(f"Session {session.id} was already terminal, failure not recorded")
            if partial_summary is not None:
                self._keep_late_summary(session, partial_summary)

    def _keep_late_summary(self, session: SessionRecord, summary: ResultSummary) -> None:
        """Attach what this run wrote to a session another writer already failed."""
        try:
            attached = self._session_repo.attach_late_summary(session.id, summary)
        except Exception as exc:
            Log.error(f"Could not record result of session {session.id}: {exc}")
            return
        if attached:
            Log.warning(
                f"Session {session.id} was failed while running; "
                f"{summary.products_created} products it created are kept in its summary"
            )
        else:
            Log.warning(f"Session {session.id} was finalized elsewhere, result discarded")
