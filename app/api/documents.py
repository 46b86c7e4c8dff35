import time
from typing import List, Optional

from fastapi import APIRouter, File, Form, HTTPException, Query, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse

from app.core.errors import InvalidInputError, SourceParseError
from app.core.logging import configure_logging
from app.models import ErrorResponse, MoveRequest, PagePreview, SessionCard
from app.services.export_sink import ExportSink
from app.services.pdf_service import PDFService, read_source
from app.storage.local import LocalStorage
from app.storage.registry import IntakeCandidate
from app.storage.sessions import get_session
from app.utils.pdf_preview import render_page_preview

router = APIRouter(prefix="/sessions/{session_id}/documents", tags=["Staged Documents"])

logger = configure_logging()
storage = LocalStorage()
pdf_service = PDFService()
export_sink = ExportSink(storage)


def _last_modified(values: Optional[List[int]], index: int, fallback: int) -> int:
    if values and index < len(values):
        return values[index]
    return fallback


@router.post(
    "",
    response_model=SessionCard,
    summary="إضافة ملفات PDF إلى نهاية قائمة الدمج",
    responses={400: {"model": ErrorResponse}},
)
async def stage_documents(
    session_id: str,
    files: List[UploadFile] = File(...),
    last_modified: Optional[List[int]] = Form(default=None),
) -> dict:
    session = get_session(session_id)
    if not files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="يجب اختيار ملف PDF واحد على الأقل.",
        )

    now_ms = int(time.time() * 1000)
    saved = []
    candidates: List[IntakeCandidate] = []
    for index, upload in enumerate(files):
        path = storage.save_upload(upload)
        saved.append(path)
        candidates.append(
            IntakeCandidate(
                name=upload.filename or path.name,
                size_bytes=path.stat().st_size,
                media_type=upload.content_type or "",
                last_modified=_last_modified(last_modified, index, now_ms),
                read=storage.file_accessor(path),
                source_path=path,
            )
        )

    try:
        session.registry.intake(candidates)
    except InvalidInputError:
        storage.cleanup(saved)
        raise

    session.touch()
    return session.to_card()


@router.get("", response_model=SessionCard, summary="الملفات المجهزة بترتيب الدمج الحالي")
async def list_documents(session_id: str) -> dict:
    return get_session(session_id).to_card()


@router.post("/move", response_model=SessionCard, summary="نقل ملف إلى موضع ملف آخر في القائمة")
async def move_document(session_id: str, payload: MoveRequest) -> dict:
    session = get_session(session_id)
    session.registry.move(payload.source_id, payload.target_id)
    session.touch()
    return session.to_card()


@router.delete("/{document_id}", response_model=SessionCard, summary="إزالة ملف من القائمة")
async def remove_document(session_id: str, document_id: str) -> dict:
    session = get_session(session_id)
    session.remove(document_id)
    return session.to_card()


@router.get(
    "/{document_id}/preview",
    summary="فتح الملف للمعاينة في نافذة جديدة",
    response_class=FileResponse,
    responses={404: {"model": ErrorResponse}},
)
async def preview_document(session_id: str, document_id: str):
    document = get_session(session_id).registry.get(document_id)
    return await export_sink.preview_one(document)


@router.get(
    "/{document_id}/thumbnail",
    response_model=PagePreview,
    summary="صورة مصغرة لصفحة من الملف",
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def document_thumbnail(session_id: str, document_id: str, page: int = Query(1, ge=1)) -> dict:
    document = get_session(session_id).registry.get(document_id)
    data = await read_source(document)
    page_count = await pdf_service.page_count(data, document.name)

    if page > page_count:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"رقم الصفحة {page} خارج نطاق الملف ({page_count} صفحة).",
        )

    try:
        preview = await run_in_threadpool(render_page_preview, data, page)
    except Exception as exc:
        logger.error("تعذر إنشاء معاينة للملف %s: %s", document.name, exc)
        raise SourceParseError(document.name) from exc

    return {
        "document_id": document.id,
        "page": page,
        "page_count": page_count,
        "preview": preview,
    }
