from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from catalog_ingest.database.models import SessionRecord
from catalog_ingest.documents.base import DocumentContent
from catalog_ingest.extraction.models import Draft
from catalog_ingest.sessions.models import ResultSummary


@dataclass(slots=True)
class PipelineContext:
    session: SessionRecord
    raw_bytes: bytes = b""
    content: DocumentContent | None = None
    raw_draft: dict[str, Any] | None = None
    draft: Draft | None = None
    summary: ResultSummary | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
