from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.documents.factory import DocumentReaderFactory
from catalog_ingest.extraction.base import BaseCatalogExtractor
from catalog_ingest.extraction.validator import validate_and_build
from catalog_ingest.gateway.file_store import FileStore
from catalog_ingest.logging.logger import Log
from catalog_ingest.materializer.materializer import CatalogMaterializer
from catalog_ingest.processor.pipeline import PipelineContext, PipelineStep
from catalog_ingest.sessions.exceptions import SessionOwnershipLostError
from catalog_ingest.sessions.models import SessionStatus


class ReadDocumentStep(PipelineStep):
    def __init__(self, file_store: FileStore, reader_factory: DocumentReaderFactory) -> None:
        self._file_store = file_store
        self._reader_factory = reader_factory

    def run(self, context: PipelineContext) -> PipelineContext:
        session = context.session
        context.raw_bytes = self._file_store.load(session.source_path)
        reader = self._reader_factory.reader_for(session.mime_type)
        context.content = reader.read(context.raw_bytes, session.mime_type)
        Log.info(
            f"Read {len(context.raw_bytes)} bytes of {session.mime_type} "
            f"for session {session.id}: {len(context.content.text)} chars of text"
        )
        return context


class ExtractDraftStep(PipelineStep):
    def __init__(self, extractor: BaseCatalogExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.content is None:
            raise ValueError("PipelineContext.content must be set before extraction")
        context.raw_draft = self._extractor.extract(context.content)
        Log.info(f"AI extraction finished for session {context.session.id}")
        return context


class MarkProcessingStep(PipelineStep):
    def __init__(self, session_repo: SessionRepository) -> None:
        self._session_repo = session_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        applied = self._session_repo.transition(
            context.session.id,
            SessionStatus.EXTRACTING_TEXT,
            SessionStatus.PROCESSING,
        )
        if not applied:
            raise SessionOwnershipLostError(
                f"Session {context.session.id} left EXTRACTING_TEXT while being processed"
            )
        context.session.status = SessionStatus.PROCESSING
        Log.info(f"Session {context.session.id} marked as processing")
        return context


class BuildDraftStep(PipelineStep):
    def __init__(self, default_channel: str) -> None:
        self._default_channel = default_channel

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.raw_draft is None:
            raise ValueError("PipelineContext.raw_draft must be set before building the draft")
        context.draft = validate_and_build(context.raw_draft, self._default_channel)
        Log.info(
            f"Draft for session {context.session.id}: {len(context.draft.products)} products"
        )
        return context


class MaterializeStep(PipelineStep):
    def __init__(self, materializer: CatalogMaterializer) -> None:
        self._materializer = materializer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.draft is None:
            raise ValueError("PipelineContext.draft must be set before materialization")
        session = context.session
        context.summary = self._materializer.materialize(
            session.store_id,
            session.id,
            context.draft,
            extract_components=session.extract_components,
        )
        return context
