from __future__ import annotations

from io import BytesIO
from typing import Sequence

from fastapi.concurrency import run_in_threadpool
from pypdf import PdfReader, PdfWriter
from pypdf import PasswordType

from app.core.errors import InsufficientInputError, SourceParseError, SourceReadError
from app.core.logging import configure_logging
from app.storage.registry import StagedDocument

logger = configure_logging()

MIN_MERGE_DOCUMENTS = 2


async def read_source(document: StagedDocument) -> bytes:
    try:
        return await document.read()
    except Exception as exc:
        logger.error("فشلت قراءة الملف %s: %s", document.name, exc)
        raise SourceReadError(document.name) from exc


class PDFService:
    """دمج ملفات PDF المجهزة بالترتيب الحالي للقائمة في مستند واحد."""

    # ------------------------------------------------------------------
    # دمج ملفات PDF
    # ------------------------------------------------------------------
    async def merge(self, documents: Sequence[StagedDocument]) -> bytes:
        """
        نسخ كل صفحات المستندات بالتسلسل إلى مستند ناتج وإرجاعه كبايتات.

        يُعالج كل مستند بالكامل قبل البدء بالذي يليه. أي فشل في القراءة أو
        التحليل يوقف العملية كاملة دون إرجاع ناتج جزئي.
        """
        order = list(documents)
        if len(order) < MIN_MERGE_DOCUMENTS:
            raise InsufficientInputError(len(order))

        logger.info("بدء دمج %s ملفات", len(order))
        writer = PdfWriter()

        for document in order:
            data = await read_source(document)
            copied = await run_in_threadpool(self._copy_pages, writer, data, document.name)
            logger.info("تم نسخ %s صفحات من %s", copied, document.name)

        merged = await run_in_threadpool(self._serialize, writer)
        logger.info("اكتمل الدمج: %s صفحة، %s بايت", len(writer.pages), len(merged))
        return merged

    # ------------------------------------------------------------------
    # عدد الصفحات لمستند في الذاكرة
    # ------------------------------------------------------------------
    async def page_count(self, data: bytes, name: str) -> int:
        reader = await run_in_threadpool(self._open_reader, data, name)
        return len(reader.pages)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _open_reader(data: bytes, name: str) -> PdfReader:
        try:
            reader = PdfReader(BytesIO(data))
            if reader.is_encrypted and reader.decrypt("") == PasswordType.NOT_DECRYPTED:
                raise SourceParseError(name)
            # فرض تحليل شجرة الصفحات هنا بدل لحظة النسخ
            len(reader.pages)
        except SourceParseError:
            logger.error("الملف %s محمي بكلمة مرور", name)
            raise
        except Exception as exc:
            logger.error("تعذر تحليل الملف %s: %s", name, exc)
            raise SourceParseError(name) from exc
        return reader

    @classmethod
    def _copy_pages(cls, writer: PdfWriter, data: bytes, name: str) -> int:
        reader = cls._open_reader(data, name)
        try:
            for index in range(len(reader.pages)):
                writer.add_page(reader.pages[index])
        except Exception as exc:
            logger.error("تعذر نسخ صفحات الملف %s: %s", name, exc)
            raise SourceParseError(name) from exc
        return len(reader.pages)

    @staticmethod
    def _serialize(writer: PdfWriter) -> bytes:
        buffer = BytesIO()
        writer.write(buffer)
        buffer.seek(0)
        return buffer.getvalue()
