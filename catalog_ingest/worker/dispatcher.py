from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor

from catalog_ingest.logging.logger import Log
from catalog_ingest.worker.session_runner import SessionRunner


class BaseDispatcher(ABC):
    @abstractmethod
    def dispatch(self, session_id: str) -> None:
        """Start processing a session without waiting for it."""
        raise NotImplementedError


class ThreadPoolDispatcher(BaseDispatcher):
    """Runs sessions on a bounded thread pool inside the API process."""

    def __init__(self, runner: SessionRunner, max_workers: int) -> None:
        self._runner = runner
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="session"
        )

    def dispatch(self, session_id: str) -> None:
        future = self._executor.submit(self._runner.run, session_id)
        future.add_done_callback(lambda f: self._log_crash(session_id, f))
        Log.debug(f"Session {session_id} dispatched")

    def shutdown(self) -> None:
        """Stop accepting sessions and block until queued and running ones finish."""
        self._executor.shutdown(wait=True)

    @staticmethod
    def _log_crash(session_id: str, future: Future) -> None:
        if future.cancelled():
            Log.warning(f"Processing of session {session_id} was cancelled")
            return
        exc = future.exception()
        if exc is not None:
            Log.error(f"Processing of session {session_id} crashed: {exc}")
