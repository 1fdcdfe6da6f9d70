from pathlib import Path

import pytest

from catalog_ingest.config.settings import Settings
from catalog_ingest.database.repositories.catalog_repository import CatalogRepository
from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.gateway.file_store import FileStore
from catalog_ingest.gateway.upload_gateway import UploadGateway
from catalog_ingest.processor.processor import build_processor
from catalog_ingest.sessions.models import SessionStatus
from catalog_ingest.worker.session_runner import SessionRunner


def _settings(tmp_path: Path) -> Settings:
    return Settings(extraction_provider="example", files_root=str(tmp_path))


@pytest.mark.integration
class TestSessionProcessing:
    def test_example_provider_run_completes(
        self, store_id: str, tmp_path: Path, csv_bytes: bytes
    ) -> None:
        settings = _settings(tmp_path)
        session_repo = SessionRepository()
        gateway = UploadGateway(
            session_repo, FileStore(tmp_path), None, settings.max_upload_bytes
        )
        runner = SessionRunner(build_processor(settings, session_repo), session_repo)

        session_id = gateway.submit(
            store_id=store_id, filename="menu.csv", media_type="text/csv", data=csv_bytes
        ).session_id
        runner.run(session_id)

        record = session_repo.find_by_id(session_id)
        assert record is not None
        assert record.status == SessionStatus.COMPLETED
        assert record.result_summary is not None
        assert record.result_summary.products_created == 1
        assert CatalogRepository().count_products_for_session(session_id) == 1

    def test_reimport_reuses_component(
        self, store_id: str, tmp_path: Path, csv_bytes: bytes
    ) -> None:
        settings = _settings(tmp_path)
        session_repo = SessionRepository()
        gateway = UploadGateway(
            session_repo, FileStore(tmp_path), None, settings.max_upload_bytes
        )
        runner = SessionRunner(build_processor(settings, session_repo), session_repo)

        for _ in range(2):
            session_id = gateway.submit(
                store_id=store_id, filename="menu.csv", media_type="text/csv", data=csv_bytes
            ).session_id
            runner.run(session_id)

        assert len(CatalogRepository().list_components(store_id)) == 1

    def test_corrupted_pdf_fails_session(
        self, store_id: str, tmp_path: Path, corrupted_pdf_bytes: bytes
    ) -> None:
        settings = _settings(tmp_path)
        session_repo = SessionRepository()
        gateway = UploadGateway(
            session_repo, FileStore(tmp_path), None, settings.max_upload_bytes
        )
        runner = SessionRunner(build_processor(settings, session_repo), session_repo)

        session_id = gateway.submit(
            store_id=store_id,
            filename="menu.pdf",
            media_type="application/pdf",
            data=corrupted_pdf_bytes,
        ).session_id
        runner.run(session_id)

        record = session_repo.find_by_id(session_id)
        assert record is not None
        assert record.status == SessionStatus.FAILED
        assert record.failure_reason is not None
        assert record.failure_reason.code == "unparseable_document"
