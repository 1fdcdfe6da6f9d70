import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from catalog_ingest.client.client import IngestionClient, StatusSnapshot
from catalog_ingest.client.exceptions import ClientTimeout, PollingError
from catalog_ingest.client.poller import SessionPoller
from catalog_ingest.sessions.models import SessionStatus

SESSION_ID = "11111111-1111-1111-1111-111111111111"


def _status_body(status: str, **extra: object) -> dict[str, object]:
    body: dict[str, object] = {
        "sessionId": SESSION_ID,
        "status": status,
        "progress": 0,
        "currentPhase": "phase",
    }
    body.update(extra)
    return body


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> IngestionClient:
    return IngestionClient("http://ingest.test", transport=httpx.MockTransport(handler))


class _Sleeper:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class TestWaitTerminal:
    def test_returns_completed_snapshot(self) -> None:
        responses = iter(
            [
                _status_body("PENDING"),
                _status_body("EXTRACTING_TEXT", progress=15),
                _status_body("COMPLETED", progress=100, productsCreated=12),
            ]
        )
        sleeper = _Sleeper()
        poller = SessionPoller(
            _client(lambda request: httpx.Response(200, json=next(responses))),
            sleep=sleeper,
        )

        snapshot = poller.wait(SESSION_ID)

        assert snapshot.status == SessionStatus.COMPLETED
        assert snapshot.products_created == 12
        assert sleeper.calls == [3.0, 3.0]

    def test_returns_failed_snapshot_with_reason(self) -> None:
        body = _status_body(
            "FAILED", failureReason={"code": "unparseable_document", "message": "bad pdf"}
        )
        poller = SessionPoller(
            _client(lambda request: httpx.Response(200, json=body)), sleep=_Sleeper()
        )

        snapshot = poller.wait(SESSION_ID)

        assert snapshot.status == SessionStatus.FAILED
        assert snapshot.failure_reason is not None
        assert snapshot.failure_reason.code == "unparseable_document"

    def test_reports_every_snapshot(self) -> None:
        responses = iter([_status_body("PROCESSING"), _status_body("COMPLETED")])
        seen: list[StatusSnapshot] = []
        poller = SessionPoller(
            _client(lambda request: httpx.Response(200, json=next(responses))),
            sleep=_Sleeper(),
        )

        poller.wait(SESSION_ID, on_status=seen.append)

        assert [s.status for s in seen] == [SessionStatus.PROCESSING, SessionStatus.COMPLETED]


class TestWaitTimeout:
    def test_gives_up_after_exactly_max_attempts(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_status_body("PROCESSING"))

        sleeper = _Sleeper()
        poller = SessionPoller(_client(handler), interval_seconds=3.0, max_attempts=40, sleep=sleeper)

        with pytest.raises(ClientTimeout) as info:
            poller.wait(SESSION_ID)

        assert len(requests) == 40
        assert len(sleeper.calls) == 39
        assert info.value.attempts == 40
        assert info.value.session_id == SESSION_ID

    def test_single_attempt_budget(self) -> None:
        sleeper = _Sleeper()
        poller = SessionPoller(
            _client(lambda request: httpx.Response(200, json=_status_body("PENDING"))),
            max_attempts=1,
            sleep=sleeper,
        )
        with pytest.raises(ClientTimeout):
            poller.wait(SESSION_ID)
        assert sleeper.calls == []

    def test_rejects_zero_budget(self) -> None:
        with pytest.raises(ValueError):
            SessionPoller(_client(lambda request: httpx.Response(200)), max_attempts=0)


class TestWaitErrors:
    def test_transport_error_stops_polling(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        poller = SessionPoller(_client(handler), sleep=_Sleeper())

        with pytest.raises(PollingError, match="failed"):
            poller.wait(SESSION_ID)
        assert len(calls) == 1

    def test_not_found_is_a_polling_error(self) -> None:
        poller = SessionPoller(
            _client(lambda request: httpx.Response(404, json={"error": "Session not found"})),
            sleep=_Sleeper(),
        )
        with pytest.raises(PollingError, match="Session not found") as info:
            poller.wait(SESSION_ID)
        assert info.value.status_code == 404

    def test_malformed_payload(self) -> None:
        poller = SessionPoller(
            _client(lambda request: httpx.Response(200, json={"status": "WEIRD"})),
            sleep=_Sleeper(),
        )
        with pytest.raises(PollingError, match="Malformed"):
            poller.wait(SESSION_ID)


class TestIngestionClientSubmit:
    def test_posts_multipart_upload(self, tmp_path: Path, csv_bytes: bytes) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(202, json={"sessionId": SESSION_ID, "status": "PENDING"})

        path = tmp_path / "prices.csv"
        path.write_bytes(csv_bytes)

        with _client(handler) as client:
            session_id = client.submit(path, "store-1", extract_components=False)

        assert session_id == SESSION_ID
        request = captured[0]
        assert request.method == "POST"
        assert request.url.path == "/api/sessions"
        body = request.read()
        assert b'name="storeId"' in body
        assert b"store-1" in body
        assert b'name="extractComponents"\r\n\r\nfalse' in body
        assert b"Content-Type: text/csv" in body

    def test_rejected_upload_carries_server_message(self, tmp_path: Path) -> None:
        path = tmp_path / "menu.zip"
        path.write_bytes(b"PK")
        error = {"error": "Unsupported file type 'application/octet-stream'."}

        with _client(lambda request: httpx.Response(415, json=error)) as client:
            with pytest.raises(PollingError, match="HTTP 415: Unsupported") as info:
                client.submit(path, "store-1")

        assert info.value.status_code == 415

    def test_status_url(self) -> None:
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, content=json.dumps(_status_body("PENDING")))

        with _client(handler) as client:
            client.get_status(SESSION_ID)

        assert paths == [f"/api/sessions/{SESSION_ID}"]
