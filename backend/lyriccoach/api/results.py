"""
Results API:

Upload → forward batch to the scoring service → normalize → replace session
Table, detail view and CSV export read from the current session only.

The session store is process-wide, so an X-API-Key sent once is cached and
reused by any later upload that arrives without the header, until the
service rejects it. That suits a single-user local tool; run one instance
per user.
"""
import os
from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, File, Header, HTTPException, Request, UploadFile
from fastapi.responses import Response

from lyriccoach.config import settings
from lyriccoach.core.demo import demo_records
from lyriccoach.core.export import export_csv
from lyriccoach.core.normalize import normalize_results
from lyriccoach.core.report import detail_view, table_row
from lyriccoach.core.scoring_client import ScoringAuthError, ScoringClient, ScoringServiceError
from lyriccoach.core.session import (
    ResultSession, ResultStore, begin_upload, forget_credential, load_demo, upload_failed, upload_succeeded,
)
from lyriccoach.schemas.result import ResultDetailResponse, ResultListResponse

router = APIRouter()
log    = structlog.get_logger()


# ── Dependencies ───────────────────────────────────────────────────────────

def get_store(request: Request) -> ResultStore:
    return request.app.state.results


def get_scoring_client() -> ScoringClient:
    return ScoringClient(
        base_url=settings.SCORING_API_BASE_URL,
        timeout=settings.SCORING_TIMEOUT_SEC,
        api_key_header=settings.SCORING_API_KEY_HEADER,
    )


def _validate(file: UploadFile):
    ext = os.path.splitext(file.filename or "")[1].lower()
    if ext not in settings.ALLOWED_AUDIO_EXTENSIONS:
        raise HTTPException(400, detail=f"Format not allowed: {ext or file.filename}")


def _listing(state: ResultSession) -> ResultListResponse:
    return ResultListResponse(
        status_message=state.status_message,
        error=state.error,
        results=[table_row(i, r) for i, r in enumerate(state.records)],
    )


# ── Endpoints ──────────────────────────────────────────────────────────────

@router.post("/upload", response_model=ResultListResponse)
async def upload_songs(
    files: Optional[List[UploadFile]] = File(None),
    x_api_key: Optional[str] = Header(None),
    store: ResultStore = Depends(get_store),
    client: ScoringClient = Depends(get_scoring_client),
):
    if not files:
        raise HTTPException(400, detail="Please select at least one audio file.")
    for f in files:
        _validate(f)

    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    parts = []
    for f in files:
        raw = await f.read()
        if len(raw) > max_bytes:
            raise HTTPException(400, detail=f"{f.filename} exceeds {settings.MAX_UPLOAD_SIZE_MB} MB")
        parts.append((f.filename, raw, f.content_type or "application/octet-stream"))

    state = store.replace(begin_upload(store.current, len(parts), api_key=x_api_key))
    api_key = state.api_key or settings.SCORING_API_KEY or None

    try:
        raw_results = await client.score_batch(parts, api_key=api_key)
    except ScoringAuthError as e:
        store.replace(forget_credential(upload_failed(state, str(e))))
        raise HTTPException(401, detail=str(e))
    except ScoringServiceError as e:
        log.error("upload_failed", files=len(parts), error=str(e))
        store.replace(upload_failed(state, str(e)))
        raise HTTPException(502, detail=str(e))

    records = normalize_results(raw_results)
    state = store.replace(upload_succeeded(state, records))
    log.info("results_ready", files=len(parts), results=len(records))
    return _listing(state)


@router.post("/demo", response_model=ResultListResponse)
async def load_demo_results(store: ResultStore = Depends(get_store)):
    state = store.replace(load_demo(store.current, demo_records()))
    return _listing(state)


@router.get("/", response_model=ResultListResponse)
async def list_results(store: ResultStore = Depends(get_store)):
    return _listing(store.current)


@router.get("/export")
async def export_results(store: ResultStore = Depends(get_store)):
    records = store.current.records
    if not records:
        raise HTTPException(404, detail="No results to export")
    return Response(
        content=export_csv(records).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{settings.EXPORT_FILENAME}"'},
    )


@router.get("/{index}", response_model=ResultDetailResponse)
async def get_result(index: int, store: ResultStore = Depends(get_store)):
    records = store.current.records
    if not 0 <= index < len(records):
        raise HTTPException(404, detail="Result not found")
    return detail_view(index, records[index])
