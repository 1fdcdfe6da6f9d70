import uuid
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from catalog_ingest.database.connection import get_connection
from catalog_ingest.database.models import SessionRecord
from catalog_ingest.sessions.models import FailureReason, ResultSummary, SessionStatus
from catalog_ingest.sessions.state_machine import FAILABLE_STATES, ensure_transition

_COLUMNS = """
    id, store_id, status, source_path, original_filename, mime_type,
    file_size_bytes, file_hash_sha256, extract_components,
    result_summary, failure_reason, created_at, updated_at
"""


def _row_to_record(row: dict[str, Any]) -> SessionRecord:
    summary = row.get("result_summary")
    failure = row.get("failure_reason")
    return SessionRecord(
        id=str(row["id"]),
        store_id=row["store_id"],
        status=SessionStatus(row["status"]),
        source_path=row["source_path"],
        original_filename=row["original_filename"],
        mime_type=row["mime_type"],
        file_size_bytes=row["file_size_bytes"],
        file_hash_sha256=row["file_hash_sha256"],
        extract_components=row["extract_components"],
        result_summary=ResultSummary.from_payload(summary) if summary else None,
        failure_reason=FailureReason.from_payload(failure) if failure else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, TypeError):
        return False
    return True


class SessionRepository:
    """Database operations for the processing_sessions table.

    Every status change is a compare-and-set on the current status, so two
    writers racing on the same session can never move it backwards.
    """

    def create(self, record: SessionRecord) -> SessionRecord:
        """Insert a new PENDING session and return it with timestamps."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO processing_sessions
                    (id, store_id, status, source_path, original_filename,
                     mime_type, file_size_bytes, file_hash_sha256, extract_components)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        record.id,
                        record.store_id,
                        SessionStatus.PENDING.value,
                        record.source_path,
                        record.original_filename,
                        record.mime_type,
                        record.file_size_bytes,
                        record.file_hash_sha256,
                        record.extract_components,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError(f"Insert of session {record.id} returned no row")
        return _row_to_record(row)

    def find_by_id(self, session_id: str) -> SessionRecord | None:
        """Find a session by ID. Returns None for unknown or malformed ids."""
        if not _is_uuid(session_id):
            return None
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM processing_sessions WHERE id = %s",
                    (session_id,),
                )
                row = cur.fetchone()
        return _row_to_record(row) if row is not None else None

    def list_recent_for_store(self, store_id: str, limit: int = 10) -> list[SessionRecord]:
        """Most recent sessions of a store, newest first."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM processing_sessions
                    WHERE store_id = %s
                    ORDER BY created_at DESC
                    LIMIT %s
                    """,
                    (store_id, limit),
                )
                rows = cur.fetchall()
        return [_row_to_record(row) for row in rows]

    def claim(self, session_id: str) -> SessionRecord | None:
        """Atomically move a PENDING session to EXTRACTING_TEXT.

        Returns the claimed session, or None if another worker got there first
        or the session does not exist.
        """
        if not _is_uuid(session_id):
            return None
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE processing_sessions
                    SET status = %s, updated_at = NOW()
                    WHERE id = %s AND status = %s
                    RETURNING {_COLUMNS}
                    """,
                    (
                        SessionStatus.EXTRACTING_TEXT.value,
                        session_id,
                        SessionStatus.PENDING.value,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        return _row_to_record(row) if row is not None else None

    def claim_next_pending(self, conn: psycopg.Connection[Any]) -> SessionRecord | None:
        """Claim the oldest pending session using SELECT FOR UPDATE SKIP LOCKED."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id
                FROM processing_sessions
                WHERE status = %s
                ORDER BY created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (SessionStatus.PENDING.value,),
            )
            row = cur.fetchone()
            if row is None:
                conn.commit()
                return None

            cur.execute(
                f"""
                UPDATE processing_sessions
                SET status = %s, updated_at = NOW()
                WHERE id = %s AND status = %s
                RETURNING {_COLUMNS}
                """,
                (
                    SessionStatus.EXTRACTING_TEXT.value,
                    row["id"],
                    SessionStatus.PENDING.value,
                ),
            )
            claimed = cur.fetchone()
        conn.commit()
        return _row_to_record(claimed) if claimed is not None else None

    def transition(
        self,
        session_id: str,
        expected: SessionStatus,
        target: SessionStatus,
    ) -> bool:
        """Compare-and-set the status. Returns False if the session was not in `expected`.

        Raises:
            InvalidTransitionError: if expected -> target is not a forward step.
        """
        ensure_transition(expected, target)
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE processing_sessions
                    SET status = %s, updated_at = NOW()
                    WHERE id = %s AND status = %s
                    """,
                    (target.value, session_id, expected.value),
                )
                applied = cur.rowcount == 1
            conn.commit()
        return applied

    def complete(self, session_id: str, summary: ResultSummary) -> bool:
        """PROCESSING -> COMPLETED with the result summary attached."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE processing_sessions
                    SET status = %s, result_summary = %s, updated_at = NOW()
                    WHERE id = %s AND status = %s
                    """,
                    (
                        SessionStatus.COMPLETED.value,
                        Jsonb(summary.to_payload()),
                        session_id,
                        SessionStatus.PROCESSING.value,
                    ),
                )
                applied = cur.rowcount == 1
            conn.commit()
        return applied

    def fail(
        self,
        session_id: str,
        reason: FailureReason,
        partial_summary: ResultSummary | None = None,
    ) -> bool:
        """Move a running session to FAILED. No-op for pending or terminal sessions."""
        summary_value = (
            Jsonb(partial_summary.to_payload()) if partial_summary is not None else None
        )
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE processing_sessions
                    SET status = %s, failure_reason = %s, result_summary = %s,
                        updated_at = NOW()
                    WHERE id = %s AND status = ANY(%s)
                    """,
                    (
                        SessionStatus.FAILED.value,
                        Jsonb(reason.to_payload()),
                        summary_value,
                        session_id,
                        [s.value for s in FAILABLE_STATES],
                    ),
                )
                applied = cur.rowcount == 1
            conn.commit()
        return applied

    def fail_stale(self, older_than_seconds: int, reason: FailureReason) -> list[str]:
        """Fail running sessions whose last transition is older than the threshold."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE processing_sessions
                    SET status = %s, failure_reason = %s, updated_at = NOW()
                    WHERE status = ANY(%s)
                      AND updated_at < NOW() - make_interval(secs => %s)
                    RETURNING id
                    """,
                    (
                        SessionStatus.FAILED.value,
                        Jsonb(reason.to_payload()),
                        [s.value for s in FAILABLE_STATES],
                        older_than_seconds,
                    ),
                )
                rows = cur.fetchall()
            conn.commit()
        return [str(row[0]) for row in rows]

    def attach_late_summary(self, session_id: str, summary: ResultSummary) -> bool:
        """Record what a run wrote after its session was already failed by another writer.

        Only fills a FAILED session that has no summary yet.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE processing_sessions
                    SET result_summary = %s, updated_at = NOW()
                    WHERE id = %s AND status = %s AND result_summary IS NULL
                    """,
                    (
                        Jsonb(summary.to_payload()),
                        session_id,
                        SessionStatus.FAILED.value,
                    ),
                )
                applied = cur.rowcount == 1
            conn.commit()
        return applied
