from fastapi import APIRouter, status

from app.core.logging import configure_logging
from app.models import ErrorResponse, OutputNameRequest, SessionCard
from app.storage.sessions import close_session, get_session, open_session

router = APIRouter(prefix="/sessions", tags=["Merge Sessions"])

logger = configure_logging()


@router.post(
    "",
    response_model=SessionCard,
    status_code=status.HTTP_201_CREATED,
    summary="فتح جلسة دمج جديدة بقائمة فارغة",
)
async def create_session() -> dict:
    session = open_session()
    return session.to_card()


@router.get("/{session_id}", response_model=SessionCard, summary="حالة الجلسة والملفات بالترتيب الحالي")
async def read_session(session_id: str) -> dict:
    return get_session(session_id).to_card()


@router.delete(
    "/{session_id}",
    summary="إغلاق الجلسة وحذف ملفاتها المؤقتة",
    responses={409: {"model": ErrorResponse}},
)
async def delete_session(session_id: str) -> dict:
    close_session(session_id)
    return {"status": "ok"}


@router.put("/{session_id}/output-name", response_model=SessionCard, summary="تعيين اسم الملف الناتج")
async def update_output_name(session_id: str, payload: OutputNameRequest) -> dict:
    session = get_session(session_id)
    session.rename(payload.output_name)
    logger.info("تم تعيين اسم الملف الناتج للجلسة %s: %s", session_id, payload.output_name)
    return session.to_card()
