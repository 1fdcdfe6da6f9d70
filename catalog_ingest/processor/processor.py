from pathlib import Path

from catalog_ingest.config.settings import Settings
from catalog_ingest.database.models import SessionRecord
from catalog_ingest.database.repositories.catalog_repository import CatalogRepository
from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.documents.factory import DocumentReaderFactory
from catalog_ingest.extraction.factory import ExtractorFactory
from catalog_ingest.gateway.file_store import FileStore
from catalog_ingest.logging.logger import Log
from catalog_ingest.materializer.materializer import CatalogMaterializer
from catalog_ingest.processor.pipeline import PipelineContext, PipelineStep
from catalog_ingest.processor.steps import (
    BuildDraftStep,
    ExtractDraftStep,
    MarkProcessingStep,
    MaterializeStep,
    ReadDocumentStep,
)


class Processor:
    """Runs the ingestion steps for one claimed session.

    Pipeline: read -> extract -> mark processing -> build draft -> materialize.
    Errors propagate to the caller, which records them on the session.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, session: SessionRecord) -> PipelineContext:
        Log.info(f"Processing session {session.id} for store {session.store_id}")
        context = PipelineContext(session=session)
        for step in self._steps:
            context = step.run(context)
        return context


def build_processor(settings: Settings, session_repo: SessionRepository) -> Processor:
    """Build a Processor with all required adapters."""
    file_store = FileStore(Path(settings.files_root))
    reader_factory = DocumentReaderFactory.create(settings.pdf_engine)
    extractor = ExtractorFactory.create(settings)
    materializer = CatalogMaterializer(
        CatalogRepository(),
        default_category=settings.default_component_category,
        sales_channel=settings.default_sales_channel,
    )
    return Processor(
        steps=[
            ReadDocumentStep(file_store=file_store, reader_factory=reader_factory),
            ExtractDraftStep(extractor=extractor),
            MarkProcessingStep(session_repo),
            BuildDraftStep(default_channel=settings.default_sales_channel),
            MaterializeStep(materializer=materializer),
        ]
    )
