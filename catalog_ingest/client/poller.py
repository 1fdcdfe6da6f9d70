import time
from collections.abc import Callable

from catalog_ingest.client.client import IngestionClient, StatusSnapshot
from catalog_ingest.client.exceptions import ClientTimeout
from catalog_ingest.logging.logger import Log


class SessionPoller:
    """Polls a session until it is terminal or the attempt budget runs out.

    The server never sees the client give up; a timed out session keeps
    running and can be checked again later.
    """

    def __init__(
        self,
        client: IngestionClient,
        *,
        interval_seconds: float = 3.0,
        max_attempts: int = 40,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._client = client
        self._interval_seconds = interval_seconds
        self._max_attempts = max_attempts
        self._sleep = sleep

    def wait(
        self,
        session_id: str,
        on_status: Callable[[StatusSnapshot], None] | None = None,
    ) -> StatusSnapshot:
        """Return the terminal snapshot of the session.

        Raises:
            ClientTimeout: after max_attempts polls without a terminal status.
            PollingError: on the first transport or HTTP error.
        """
        attempts = 0
        while True:
            snapshot = self._client.get_status(session_id)
            attempts += 1
            if on_status is not None:
                on_status(snapshot)
            if snapshot.is_terminal:
                Log.debug(f"Session {session_id} is {snapshot.status} after {attempts} polls")
                return snapshot
            if attempts >= self._max_attempts:
                raise ClientTimeout(session_id, attempts)
            self._sleep(self._interval_seconds)
