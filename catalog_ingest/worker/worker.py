import time

from catalog_ingest.config.settings import Settings
from catalog_ingest.database.connection import get_connection
from catalog_ingest.database.models import SessionRecord
from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.logging.logger import Log
from catalog_ingest.sessions.models import FailureReason
from catalog_ingest.worker.session_runner import SessionRunner

STALE_FAILURE_CODE = "extraction_timeout"


class Worker:
    """Poll loop: sweep stale sessions -> claim -> run -> sleep."""

    def __init__(
        self,
        session_repo: SessionRepository,
        session_runner: SessionRunner,
        settings: Settings,
    ) -> None:
        self._session_repo = session_repo
        self._session_runner = session_runner
        self._settings = settings

    def run(self, max_sessions: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_sessions is set, stop after processing that many sessions (for testing).
        """
        Log.info("Worker started, polling for pending sessions")
        sessions_done = 0
        try:
            while True:
                if max_sessions is not None and sessions_done >= max_sessions:
                    break
                self.sweep_stale()
                session = self._try_claim_session()
                if session:
                    self._session_runner.run_claimed(session)
                    sessions_done += 1
                else:
                    Log.debug("No pending sessions, sleeping")
                    time.sleep(self._settings.worker_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def sweep_stale(self) -> list[str]:
        """Fail sessions stuck in a running status past the stale threshold."""
        threshold = self._settings.session_stale_after_seconds
        reason = FailureReason(
            STALE_FAILURE_CODE,
            f"Processing did not finish within {threshold} seconds",
        )
        try:
            failed = self._session_repo.fail_stale(threshold, reason)
        except Exception as exc:
            Log.warning(f"Stale session sweep failed, will retry: {exc}")
            return []
        for session_id in failed:
            Log.warning(f"Session {session_id} timed out and was marked as failed")
        return failed

    def _try_claim_session(self) -> SessionRecord | None:
        """Attempt to claim the next pending session. Gracefully handle DB errors."""
        try:
            with get_connection() as conn:
                return self._session_repo.claim_next_pending(conn)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
