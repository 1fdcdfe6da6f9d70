"""
Shared dependencies and application state for the API server.
The gateway, repository and dispatcher are built once at startup and
reused across requests.
"""
from pathlib import Path

from catalog_ingest.config.settings import Settings
from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.gateway.file_store import FileStore
from catalog_ingest.gateway.upload_gateway import UploadGateway
from catalog_ingest.logging.logger import Log
from catalog_ingest.processor.processor import build_processor
from catalog_ingest.worker.dispatcher import ThreadPoolDispatcher
from catalog_ingest.worker.session_runner import SessionRunner

_session_repo: SessionRepository | None = None
_upload_gateway: UploadGateway | None = None
_dispatcher: ThreadPoolDispatcher | None = None


def get_session_repository() -> SessionRepository:
    """FastAPI dependency: returns the session repository."""
    if _session_repo is None:
        raise RuntimeError("SessionRepository not initialized. Server may still be starting.")
    return _session_repo


def get_upload_gateway() -> UploadGateway:
    """FastAPI dependency: returns the initialized UploadGateway."""
    if _upload_gateway is None:
        raise RuntimeError("UploadGateway not initialized. Server may still be starting.")
    return _upload_gateway


def initialize_components(settings: Settings) -> None:
    """Build the ingestion components. Called once during lifespan startup."""
    global _session_repo, _upload_gateway, _dispatcher  # noqa: PLW0603

    _session_repo = SessionRepository()
    processor = build_processor(settings, _session_repo)
    _dispatcher = ThreadPoolDispatcher(
        SessionRunner(processor, _session_repo),
        max_workers=settings.dispatch_max_workers,
    )
    _upload_gateway = UploadGateway(
        session_repo=_session_repo,
        file_store=FileStore(Path(settings.files_root)),
        dispatcher=_dispatcher,
        max_upload_bytes=settings.max_upload_bytes,
    )
    Log.info(
        f"API components ready: provider={settings.extraction_provider}, "
        f"dispatch workers={settings.dispatch_max_workers}"
    )


def shutdown_components() -> None:
    """Drain the dispatcher. Must run before the connection pool is closed."""
    global _dispatcher, _upload_gateway  # noqa: PLW0603
    if _dispatcher is not None:
        Log.info("Waiting for dispatched sessions to finish")
        _dispatcher.shutdown()
    _dispatcher = None
    _upload_gateway = None
