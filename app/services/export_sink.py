from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from fastapi.responses import FileResponse
from starlette.types import Receive, Scope, Send

from app.core.logging import configure_logging
from app.services.pdf_service import read_source
from app.storage.local import LocalStorage
from app.storage.registry import StagedDocument

logger = configure_logging()

PDF_MEDIA_TYPE = "application/pdf"


class ArtifactResponse(FileResponse):
    """ملف مؤقت يُحرَّر بعد الإرسال سواء نجح أو فشل."""

    def __init__(self, *args, release: Callable[[], None], **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._release = release

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            self._release()


class ExportSink:
    """تسليم البايتات للمستخدم كملف للتنزيل أو للمعاينة في سياق عرض جديد."""

    def __init__(self, storage: Optional[LocalStorage] = None) -> None:
        self.storage = storage or LocalStorage()

    def release(self, path: Path) -> None:
        self.storage.cleanup([path])
        logger.info("تم تحرير الملف المؤقت %s", path.name)

    def _hand_off(
        self,
        data: bytes,
        filename: str,
        media_type: str,
        disposition: str,
        headers: Optional[dict] = None,
    ) -> ArtifactResponse:
        path = self.storage.save_bytes(data, suffix=".pdf")
        try:
            return ArtifactResponse(
                path,
                media_type=media_type,
                filename=filename,
                content_disposition_type=disposition,
                headers=headers,
                release=lambda: self.release(path),
            )
        except Exception:
            self.release(path)
            raise

    def export_artifact(
        self,
        data: bytes,
        suggested_name: str,
        media_type: str = PDF_MEDIA_TYPE,
        headers: Optional[dict] = None,
    ) -> ArtifactResponse:
        logger.info("تسليم الملف الناتج للتنزيل: %s", suggested_name)
        return self._hand_off(data, suggested_name, media_type, "attachment", headers)

    async def preview_one(self, document: StagedDocument) -> ArtifactResponse:
        data = await read_source(document)
        logger.info("فتح معاينة الملف %s", document.name)
        return self._hand_off(data, document.name, document.mime_type or PDF_MEDIA_TYPE, "inline")
