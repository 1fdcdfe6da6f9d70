"""
Session routes.

POST /api/sessions                 upload a document, returns 202 with the session id
GET  /api/sessions/{session_id}    poll the status of one session
GET  /api/sessions?storeId=...     most recent sessions of a store
"""
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from catalog_ingest.api.dependencies import get_session_repository, get_upload_gateway
from catalog_ingest.api.schemas import (
    SessionListResponse,
    SessionStatusResponse,
    SubmitResponse,
)
from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.gateway.exceptions import ValidationError
from catalog_ingest.gateway.upload_gateway import UploadGateway
from catalog_ingest.sessions.exceptions import SessionNotFoundError

router = APIRouter(prefix="/api/sessions", tags=["sessions"])

RECENT_SESSIONS_LIMIT = 10


@router.post(
    "",
    response_model=SubmitResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Upload a menu document and start a processing session",
)
async def submit_document(
    file: UploadFile | None = File(None),
    store_id: str = Form("", alias="storeId"),
    auto_process: bool = Form(True, alias="autoProcess"),
    extract_components: bool = Form(True, alias="extractComponents"),
    gateway: UploadGateway = Depends(get_upload_gateway),
) -> SubmitResponse:
    """Accept the upload and return as soon as the session is recorded.

    Extraction runs in the background; poll the status route for the outcome.
    """
    if file is None:
        raise ValidationError("No file provided.")
    # One byte past the limit is enough to reject the upload.
    data = await file.read(gateway.max_upload_bytes + 1)
    result = await run_in_threadpool(
        gateway.submit,
        store_id=store_id,
        filename=file.filename,
        media_type=file.content_type,
        data=data,
        auto_process=auto_process,
        extract_components=extract_components,
    )
    return SubmitResponse(session_id=result.session_id, status=result.status.value)


@router.get(
    "/{session_id}",
    response_model=SessionStatusResponse,
    response_model_exclude_none=True,
    summary="Get the status of a processing session",
)
def get_session_status(
    session_id: str,
    session_repo: SessionRepository = Depends(get_session_repository),
) -> SessionStatusResponse:
    record = session_repo.find_by_id(session_id)
    if record is None:
        raise SessionNotFoundError(session_id)
    return SessionStatusResponse.from_record(record)


@router.get(
    "",
    response_model=SessionListResponse,
    response_model_exclude_none=True,
    summary="List the most recent sessions of a store",
)
def list_sessions(
    store_id: str = Query(..., alias="storeId", min_length=1),
    session_repo: SessionRepository = Depends(get_session_repository),
) -> SessionListResponse:
    records = session_repo.list_recent_for_store(store_id, limit=RECENT_SESSIONS_LIMIT)
    return SessionListResponse(
        sessions=[SessionStatusResponse.from_record(r) for r in records]
    )
