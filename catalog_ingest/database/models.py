from dataclasses import dataclass, field
from datetime import datetime

from catalog_ingest.sessions.models import FailureReason, ResultSummary, SessionStatus


@dataclass
class SessionRecord:
    """Represents a row from the processing_sessions table."""

    id: str
    store_id: str
    status: SessionStatus
    source_path: str
    original_filename: str
    mime_type: str
    file_size_bytes: int
    file_hash_sha256: str
    extract_components: bool = True
    result_summary: ResultSummary | None = None
    failure_reason: FailureReason | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class CategoryRecord:
    """Represents a row from the component_categories table."""

    id: str
    store_id: str
    name: str


@dataclass
class ComponentRecord:
    """Represents a row from the components table."""

    id: str
    store_id: str
    name: str
    category_id: str
    aliases: list[str] = field(default_factory=list)
