from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List
from uuid import uuid4

from fastapi import HTTPException, status

from app.core.config import get_settings
from app.core.errors import MergeInProgressError
from app.core.logging import configure_logging
from app.services.naming import default_name
from app.storage.registry import StagingRegistry
from app.utils.file_utils import clean_temp_files

logger = configure_logging()


@dataclass
class MergeSession:
    """حالة جلسة الدمج: قائمة الملفات، اسم الملف الناتج، وحالة الانشغال."""

    session_id: str
    registry: StagingRegistry
    output_name: str = field(default_factory=default_name)
    busy: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    touched_at: datetime = field(default_factory=datetime.utcnow)
    _retired: List[Path] = field(default_factory=list, repr=False)

    def touch(self) -> None:
        self.touched_at = datetime.utcnow()

    def rename(self, output_name: str) -> None:
        self.output_name = output_name
        self.touch()

    def begin_merge(self) -> None:
        if self.busy:
            raise MergeInProgressError()
        self.busy = True
        self.touch()

    def end_merge(self) -> None:
        self.busy = False
        self._flush()
        self.touch()

    def remove(self, document_id: str) -> None:
        """إزالة ملف من القائمة؛ يؤجل حذف ملفه المؤقت حتى انتهاء أي دمج جارٍ."""
        document = self.registry.find(document_id)
        self.registry.remove(document_id)
        if document and document.source_path:
            self._retired.append(document.source_path)
        if not self.busy:
            self._flush()
        self.touch()

    def release(self) -> None:
        clean_temp_files(document.source_path for document in self.registry.list())
        self._flush()

    def _flush(self) -> None:
        clean_temp_files(self._retired)
        self._retired.clear()

    def to_card(self) -> dict:
        documents = [document.to_card() for document in self.registry.list()]
        return {
            "session_id": self.session_id,
            "output_name": self.output_name,
            "default_name": default_name(),
            "busy": self.busy,
            "created_at": self.created_at,
            "document_count": len(documents),
            "documents": documents,
        }


_sessions: Dict[str, MergeSession] = {}


def _ttl() -> timedelta:
    return timedelta(minutes=get_settings().session_ttl_minutes)


def open_session() -> MergeSession:
    cleanup()
    settings = get_settings()
    session = MergeSession(
        session_id=uuid4().hex,
        registry=StagingRegistry(settings.accepted_media_type),
    )
    _sessions[session.session_id] = session
    logger.info("تم فتح جلسة دمج جديدة: %s", session.session_id)
    return session


def get_session(session_id: str) -> MergeSession:
    cleanup()
    session = _sessions.get(session_id)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="الجلسة المطلوبة غير موجودة أو انتهت صلاحيتها.",
        )
    session.touch()
    return session


def close_session(session_id: str) -> None:
    session = _sessions.get(session_id)
    if session and session.busy:
        raise MergeInProgressError()
    _sessions.pop(session_id, None)
    if session:
        session.release()
        logger.info("تم إغلاق الجلسة %s", session_id)


def cleanup() -> None:
    """حذف الجلسات المنتهية الصلاحية وملفاتها المؤقتة، مع استثناء الجلسات المشغولة."""
    now = datetime.utcnow()
    ttl = _ttl()
    expired = [
        session_id
        for session_id, session in _sessions.items()
        if not session.busy and now - session.touched_at > ttl
    ]
    for session_id in expired:
        session = _sessions.pop(session_id)
        session.release()
        logger.info("انتهت صلاحية الجلسة %s", session_id)
