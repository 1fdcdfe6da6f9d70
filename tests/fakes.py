"""In-memory stand-ins for the PostgreSQL repositories, used by unit tests."""

import threading
import uuid
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any

from catalog_ingest.database.models import CategoryRecord, ComponentRecord, SessionRecord
from catalog_ingest.extraction.models import ExtractedComponent
from catalog_ingest.materializer.models import NewProduct
from catalog_ingest.sessions.models import FailureReason, ResultSummary, SessionStatus
from catalog_ingest.sessions.state_machine import FAILABLE_STATES, ensure_transition


class InMemorySessionRepository:
    """Same compare-and-set semantics as SessionRepository, backed by a dict."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.sessions: dict[str, SessionRecord] = {}

    def _set(self, session_id: str, **changes: Any) -> SessionRecord:
        updated = replace(self.sessions[session_id], updated_at=datetime.now(UTC), **changes)
        self.sessions[session_id] = updated
        return replace(updated)

    def create(self, record: SessionRecord) -> SessionRecord:
        now = datetime.now(UTC)
        with self._lock:
            stored = replace(
                record, status=SessionStatus.PENDING, created_at=now, updated_at=now
            )
            self.sessions[record.id] = stored
            return replace(stored)

    def find_by_id(self, session_id: str) -> SessionRecord | None:
        with self._lock:
            record = self.sessions.get(session_id)
            return replace(record) if record is not None else None

    def list_recent_for_store(self, store_id: str, limit: int = 10) -> list[SessionRecord]:
        with self._lock:
            records = [r for r in self.sessions.values() if r.store_id == store_id]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return [replace(r) for r in records[:limit]]

    def claim(self, session_id: str) -> SessionRecord | None:
        with self._lock:
            record = self.sessions.get(session_id)
            if record is None or record.status != SessionStatus.PENDING:
                return None
            return self._set(session_id, status=SessionStatus.EXTRACTING_TEXT)

    def claim_next_pending(self, conn: Any = None) -> SessionRecord | None:
        with self._lock:
            pending = [r for r in self.sessions.values() if r.status == SessionStatus.PENDING]
            if not pending:
                return None
            oldest = min(pending, key=lambda r: r.created_at)
            return self._set(oldest.id, status=SessionStatus.EXTRACTING_TEXT)

    def transition(self, session_id: str, expected: SessionStatus, target: SessionStatus) -> bool:
        ensure_transition(expected, target)
        with self._lock:
            record = self.sessions.get(session_id)
            if record is None or record.status != expected:
                return False
            self._set(session_id, status=target)
            return True

    def complete(self, session_id: str, summary: ResultSummary) -> bool:
        with self._lock:
            record = self.sessions.get(session_id)
            if record is None or record.status != SessionStatus.PROCESSING:
                return False
            self._set(session_id, status=SessionStatus.COMPLETED, result_summary=summary)
            return True

    def fail(
        self,
        session_id: str,
        reason: FailureReason,
        partial_summary: ResultSummary | None = None,
    ) -> bool:
        with self._lock:
            record = self.sessions.get(session_id)
            if record is None or record.status not in FAILABLE_STATES:
                return False
            self._set(
                session_id,
                status=SessionStatus.FAILED,
                failure_reason=reason,
                result_summary=partial_summary,
            )
            return True

    def fail_stale(self, older_than_seconds: int, reason: FailureReason) -> list[str]:
        cutoff = datetime.now(UTC) - timedelta(seconds=older_than_seconds)
        failed: list[str] = []
        with self._lock:
            for record in list(self.sessions.values()):
                if record.status in FAILABLE_STATES and record.updated_at < cutoff:
                    self._set(record.id, status=SessionStatus.FAILED, failure_reason=reason)
                    failed.append(record.id)
        return failed

    def attach_late_summary(self, session_id: str, summary: ResultSummary) -> bool:
        with self._lock:
            record = self.sessions.get(session_id)
            if (
                record is None
                or record.status != SessionStatus.FAILED
                or record.result_summary is not None
            ):
                return False
            self._set(session_id, result_summary=summary)
            return True

    def backdate(self, session_id: str, seconds: int) -> None:
        with self._lock:
            record = self.sessions[session_id]
            self.sessions[session_id] = replace(
                record, updated_at=record.updated_at - timedelta(seconds=seconds)
            )


class InMemoryCatalogRepository:
    """Catalog tables as lists. `fail_on_product` makes the n-th create_product call raise."""

    def __init__(
        self,
        components: list[ComponentRecord] | None = None,
        categories: list[CategoryRecord] | None = None,
        fail_on_product: int | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self.components: list[ComponentRecord] = list(components or [])
        self.categories: list[CategoryRecord] = list(categories or [])
        self.products: dict[str, tuple[str, str, NewProduct]] = {}
        self.component_prices: dict[str, dict[str, float] | None] = {}
        self._fail_on_product = fail_on_product
        self._product_calls = 0

    def list_components(self, store_id: str) -> list[ComponentRecord]:
        with self._lock:
            return [replace(c) for c in self.components if c.store_id == store_id]

    def list_categories(self, store_id: str) -> list[CategoryRecord]:
        with self._lock:
            return [replace(c) for c in self.categories if c.store_id == store_id]

    def create_category(self, store_id: str, name: str) -> CategoryRecord:
        record = CategoryRecord(id=str(uuid.uuid4()), store_id=store_id, name=name)
        with self._lock:
            self.categories.append(record)
        return replace(record)

    def create_component(
        self,
        store_id: str,
        category_id: str,
        component: ExtractedComponent,
        sales_channel: str,
    ) -> ComponentRecord:
        record = ComponentRecord(
            id=str(uuid.uuid4()),
            store_id=store_id,
            name=component.name,
            category_id=category_id,
            aliases=sorted(component.aliases),
        )
        with self._lock:
            self.components.append(record)
            self.component_prices[record.id] = (
                {sales_channel: component.default_price}
                if component.default_price is not None
                else None
            )
        return replace(record)

    def create_product(self, store_id: str, session_id: str, product: NewProduct) -> str:
        with self._lock:
            self._product_calls += 1
            if self._fail_on_product == self._product_calls:
                raise RuntimeError("connection reset by peer")
            product_id = str(uuid.uuid4())
            self.products[product_id] = (store_id, session_id, product)
        return product_id

    def count_products_for_session(self, session_id: str) -> int:
        with self._lock:
            return sum(1 for _, sid, _ in self.products.values() if sid == session_id)

    def products_for_session(self, session_id: str) -> list[NewProduct]:
        with self._lock:
            return [p for _, sid, p in self.products.values() if sid == session_id]
