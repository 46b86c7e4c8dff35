from typing import Optional

from fastapi import APIRouter
from fastapi.responses import FileResponse

from app.core.config import get_settings
from app.core.logging import configure_logging
from app.models import ErrorResponse, MergeCommitRequest
from app.services.export_sink import PDF_MEDIA_TYPE, ExportSink
from app.services.naming import output_filename
from app.services.pdf_service import PDFService
from app.storage.local import LocalStorage
from app.storage.sessions import get_session

router = APIRouter(prefix="/sessions/{session_id}/merge", tags=["PDF Merge"])

settings = get_settings()
logger = configure_logging()
storage = LocalStorage()
pdf_service = PDFService()
export_sink = ExportSink(storage)


@router.post(
    "",
    summary="دمج الملفات بالترتيب الحالي وتنزيل الملف الناتج",
    response_class=FileResponse,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def commit_merge(session_id: str, payload: Optional[MergeCommitRequest] = None):
    session = get_session(session_id)
    # لقطة من الترتيب لحظة الطلب؛ أي إعادة ترتيب لاحقة لا تؤثر على هذا الدمج
    documents = session.registry.list()

    session.begin_merge()
    try:
        merged = await pdf_service.merge(documents)
    finally:
        session.end_merge()

    requested = payload.output_filename if payload and payload.output_filename is not None else session.output_name
    filename = output_filename(requested, settings.output_extension)

    logger.info("تم دمج %s ملفات في ملف واحد: %s", len(documents), filename)
    return export_sink.export_artifact(merged, filename, PDF_MEDIA_TYPE)
