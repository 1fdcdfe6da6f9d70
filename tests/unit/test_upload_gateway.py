import hashlib
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from catalog_ingest.gateway.exceptions import (
    FileTooLargeError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from catalog_ingest.gateway.file_store import FileStore
from catalog_ingest.gateway.upload_gateway import UploadGateway
from catalog_ingest.sessions.models import SessionStatus
from catalog_ingest.worker.dispatcher import ThreadPoolDispatcher
from tests.fakes import InMemorySessionRepository

MAX = 10 * 1024 * 1024


def _make_gateway(
    tmp_path: Path,
    dispatcher: MagicMock | ThreadPoolDispatcher | None = None,
) -> tuple[UploadGateway, InMemorySessionRepository]:
    repo = InMemorySessionRepository()
    gateway = UploadGateway(repo, FileStore(tmp_path), dispatcher, max_upload_bytes=MAX)
    return gateway, repo


class TestSubmitAccepted:
    def test_creates_pending_session(self, tmp_path: Path, menu_pdf_bytes: bytes) -> None:
        gateway, repo = _make_gateway(tmp_path)

        result = gateway.submit(
            store_id="store-1",
            filename="menu.pdf",
            media_type="application/pdf",
            data=menu_pdf_bytes,
        )

        assert result.status == SessionStatus.PENDING
        record = repo.find_by_id(result.session_id)
        assert record is not None
        assert record.store_id == "store-1"
        assert record.mime_type == "application/pdf"
        assert record.file_size_bytes == len(menu_pdf_bytes)
        assert record.file_hash_sha256 == hashlib.sha256(menu_pdf_bytes).hexdigest()
        assert Path(record.source_path).read_bytes() == menu_pdf_bytes

    def test_dispatches_new_session(self, tmp_path: Path, csv_bytes: bytes) -> None:
        dispatcher = MagicMock()
        gateway, _repo = _make_gateway(tmp_path, dispatcher)

        result = gateway.submit(
            store_id="s", filename="prices.csv", media_type="text/csv", data=csv_bytes
        )

        dispatcher.dispatch.assert_called_once_with(result.session_id)

    def test_auto_process_off_leaves_session_for_worker(
        self, tmp_path: Path, csv_bytes: bytes
    ) -> None:
        dispatcher = MagicMock()
        gateway, _repo = _make_gateway(tmp_path, dispatcher)

        gateway.submit(
            store_id="s",
            filename="prices.csv",
            media_type="text/csv",
            data=csv_bytes,
            auto_process=False,
        )

        dispatcher.dispatch.assert_not_called()

    def test_dispatch_failure_keeps_session_pending(
        self, tmp_path: Path, csv_bytes: bytes
    ) -> None:
        dispatcher = MagicMock()
        dispatcher.dispatch.side_effect = RuntimeError("cannot schedule new futures")
        gateway, repo = _make_gateway(tmp_path, dispatcher)

        result = gateway.submit(
            store_id="s", filename="prices.csv", media_type="text/csv", data=csv_bytes
        )

        record = repo.find_by_id(result.session_id)
        assert record is not None
        assert record.status == SessionStatus.PENDING

    def test_filename_is_reduced_to_basename(self, tmp_path: Path, csv_bytes: bytes) -> None:
        gateway, repo = _make_gateway(tmp_path)

        result = gateway.submit(
            store_id="s", filename="../../etc/menu.csv", media_type="text/csv", data=csv_bytes
        )

        record = repo.find_by_id(result.session_id)
        assert record is not None
        assert record.original_filename == "menu.csv"

    def test_extract_components_flag_is_recorded(self, tmp_path: Path, csv_bytes: bytes) -> None:
        gateway, repo = _make_gateway(tmp_path)

        result = gateway.submit(
            store_id="s",
            filename="prices.csv",
            media_type="text/csv",
            data=csv_bytes,
            extract_components=False,
        )

        record = repo.find_by_id(result.session_id)
        assert record is not None
        assert record.extract_components is False


class TestSubmitRejected:
    def test_fifteen_mebibyte_upload_leaves_no_trace(self, tmp_path: Path) -> None:
        dispatcher = MagicMock()
        gateway, repo = _make_gateway(tmp_path, dispatcher)

        with pytest.raises(FileTooLargeError):
            gateway.submit(
                store_id="s",
                filename="huge.pdf",
                media_type="application/pdf",
                data=b"0" * (15 * 1024 * 1024),
            )

        assert repo.sessions == {}
        assert list(tmp_path.iterdir()) == []
        dispatcher.dispatch.assert_not_called()

    def test_unsupported_type(self, tmp_path: Path) -> None:
        gateway, repo = _make_gateway(tmp_path)
        with pytest.raises(UnsupportedMediaTypeError):
            gateway.submit(
                store_id="s", filename="menu.zip", media_type="application/zip", data=b"PK"
            )
        assert repo.sessions == {}

    @pytest.mark.parametrize("store_id", ["", "../other", "a" * 65, "store 1"])
    def test_invalid_store_id(self, tmp_path: Path, csv_bytes: bytes, store_id: str) -> None:
        gateway, repo = _make_gateway(tmp_path)
        with pytest.raises(ValidationError, match="storeId"):
            gateway.submit(
                store_id=store_id, filename="a.csv", media_type="text/csv", data=csv_bytes
            )
        assert repo.sessions == {}

    def test_database_failure_removes_stored_file(
        self, tmp_path: Path, csv_bytes: bytes
    ) -> None:
        repo = MagicMock()
        repo.create.side_effect = RuntimeError("db down")
        gateway = UploadGateway(repo, FileStore(tmp_path), None, max_upload_bytes=MAX)

        with pytest.raises(RuntimeError, match="db down"):
            gateway.submit(
                store_id="s", filename="a.csv", media_type="text/csv", data=csv_bytes
            )

        assert list((tmp_path / "s").iterdir()) == []


class TestSubmitDoesNotWait:
    def test_returns_while_extraction_is_still_running(
        self, tmp_path: Path, csv_bytes: bytes
    ) -> None:
        started = threading.Event()
        release = threading.Event()
        runner = MagicMock()

        def slow_run(session_id: str) -> None:
            started.set()
            release.wait(timeout=5)

        runner.run.side_effect = slow_run
        dispatcher = ThreadPoolDispatcher(runner, max_workers=1)
        gateway, repo = _make_gateway(tmp_path, dispatcher)
        try:
            result = gateway.submit(
                store_id="s", filename="a.csv", media_type="text/csv", data=csv_bytes
            )
            assert started.wait(timeout=5)
            assert not release.is_set()
            assert result.status == SessionStatus.PENDING
            assert repo.find_by_id(result.session_id) is not None
        finally:
            release.set()
            dispatcher.shutdown()

        runner.run.assert_called_once_with(result.session_id)
