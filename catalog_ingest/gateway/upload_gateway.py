import hashlib
import re
import uuid
from dataclasses import dataclass
from pathlib import PurePath

from catalog_ingest.database.models import SessionRecord
from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.gateway.exceptions import ValidationError
from catalog_ingest.gateway.file_store import FileStore
from catalog_ingest.gateway.validation import validate_upload
from catalog_ingest.logging.logger import Log
from catalog_ingest.sessions.models import SessionStatus
from catalog_ingest.worker.dispatcher import BaseDispatcher

_STORE_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


@dataclass(frozen=True)
class SubmitResult:
    session_id: str
    status: SessionStatus


class UploadGateway:
    """Accepts an upload, records a PENDING session and hands it off without waiting."""

    def __init__(
        self,
        session_repo: SessionRepository,
        file_store: FileStore,
        dispatcher: BaseDispatcher | None,
        max_upload_bytes: int,
    ) -> None:
        self._session_repo = session_repo
        self._file_store = file_store
        self._dispatcher = dispatcher
        self._max_upload_bytes = max_upload_bytes

    def submit(
        self,
        *,
        store_id: str,
        filename: str | None,
        media_type: str | None,
        data: bytes,
        auto_process: bool = True,
        extract_components: bool = True,
    ) -> SubmitResult:
        """Validate and store the document, create its session, dispatch it.

        Raises:
            ValidationError: if the upload is rejected. Nothing is persisted.
        """
        if not _STORE_ID.match(store_id or ""):
            raise ValidationError("A valid storeId is required.")
        canonical_type = validate_upload(media_type, len(data), self._max_upload_bytes)

        session_id = str(uuid.uuid4())
        path = self._file_store.save(store_id, session_id, canonical_type, data)
        try:
            session = self._session_repo.create(
                SessionRecord(
                    id=session_id,
                    store_id=store_id,
                    status=SessionStatus.PENDING,
                    source_path=str(path),
                    original_filename=PurePath(filename or "upload").name,
                    mime_type=canonical_type,
                    file_size_bytes=len(data),
                    file_hash_sha256=hashlib.sha256(data).hexdigest(),
                    extract_components=extract_components,
                )
            )
        except Exception:
            self._file_store.delete(str(path))
            raise
        Log.info(
            f"Session {session.id} created for store {store_id} "
            f"({canonical_type}, {len(data)} bytes)"
        )

        if auto_process and self._dispatcher is not None:
            try:
                self._dispatcher.dispatch(session.id)
            except Exception as exc:
                # The worker loop still claims PENDING sessions, so the upload is not lost.
                Log.warning(f"Dispatch of session {session.id} failed, left pending: {exc}")

        return SubmitResult(session_id=session.id, status=session.status)

    @property
    def max_upload_bytes(self) -> int:
        return self._max_upload_bytes
