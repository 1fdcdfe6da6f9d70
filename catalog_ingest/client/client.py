from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from catalog_ingest.client.exceptions import PollingError
from catalog_ingest.documents.media_types import FILE_EXTENSIONS
from catalog_ingest.sessions.models import FailureReason, SessionStatus


@dataclass(frozen=True)
class StatusSnapshot:
    """One answer of the status route."""

    session_id: str
    status: SessionStatus
    progress: int
    current_phase: str
    products_created: int | None = None
    components_created: int | None = None
    categories_created: int | None = None
    failure_reason: FailureReason | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "StatusSnapshot":
        try:
            failure = payload.get("failureReason")
            return cls(
                session_id=str(payload["sessionId"]),
                status=SessionStatus(payload["status"]),
                progress=int(payload.get("progress", 0)),
                current_phase=str(payload.get("currentPhase", "")),
                products_created=payload.get("productsCreated"),
                components_created=payload.get("componentsCreated"),
                categories_created=payload.get("categoriesCreated"),
                failure_reason=FailureReason.from_payload(failure) if failure else None,
            )
        except (KeyError, ValueError, TypeError) as exc:
            raise PollingError(f"Malformed status payload: {exc}") from exc


def _guess_media_type(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix == ".jpeg":
        suffix = ".jpg"
    for media_type, extension in FILE_EXTENSIONS.items():
        if extension == suffix:
            return media_type
    return "application/octet-stream"


class IngestionClient:
    """Thin httpx wrapper over the session routes of the ingestion API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = httpx.Client(
            base_url=base_url, timeout=timeout_seconds, transport=transport
        )

    def __enter__(self) -> "IngestionClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def submit(
        self,
        path: Path,
        store_id: str,
        *,
        auto_process: bool = True,
        extract_components: bool = True,
    ) -> str:
        """Upload a document and return the new session id."""
        data = {
            "storeId": store_id,
            "autoProcess": str(auto_process).lower(),
            "extractComponents": str(extract_components).lower(),
        }
        files = {"file": (path.name, path.read_bytes(), _guess_media_type(path))}
        payload = self._request("POST", "/api/sessions", data=data, files=files)
        try:
            return str(payload["sessionId"])
        except KeyError as exc:
            raise PollingError("Submit response has no sessionId") from exc

    def get_status(self, session_id: str) -> StatusSnapshot:
        return StatusSnapshot.from_payload(
            self._request("GET", f"/api/sessions/{session_id}")
        )

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise PollingError(f"Request to {url} failed: {exc}") from exc
        if response.is_error:
            raise PollingError(_error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise PollingError(f"Response from {url} is not JSON") from exc


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return f"HTTP {response.status_code}: {body['error']}"
    return f"HTTP {response.status_code}"
