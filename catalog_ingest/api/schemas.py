from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from catalog_ingest.database.models import SessionRecord
from catalog_ingest.sessions.state_machine import current_phase, progress_percentage


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubmitResponse(CamelModel):
    session_id: str
    status: str


class FailureReasonBody(CamelModel):
    code: str
    message: str


class SessionStatusResponse(CamelModel):
    """Status payload polled by clients. Counts appear once the session is terminal."""

    session_id: str
    store_id: str
    status: str
    progress: int
    current_phase: str
    original_filename: str
    products_created: int | None = None
    components_created: int | None = None
    categories_created: int | None = None
    needs_review: bool | None = None
    failure_reason: FailureReasonBody | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, record: SessionRecord) -> "SessionStatusResponse":
        response = cls(
            session_id=record.id,
            store_id=record.store_id,
            status=record.status.value,
            progress=progress_percentage(record.status),
            current_phase=current_phase(record.status),
            original_filename=record.original_filename,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
        if not record.status.is_terminal:
            return response
        summary = record.result_summary
        if summary is not None:
            response.products_created = summary.products_created
            response.components_created = len(summary.component_ids)
            response.categories_created = len(summary.category_ids)
            response.needs_review = summary.needs_review
        if record.failure_reason is not None:
            response.failure_reason = FailureReasonBody(
                code=record.failure_reason.code,
                message=record.failure_reason.message,
            )
        return response


class SessionListResponse(CamelModel):
    sessions: list[SessionStatusResponse]
