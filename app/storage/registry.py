from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Set
from uuid import uuid4

from app.core.errors import DocumentNotFoundError, InvalidInputError
from app.core.logging import configure_logging
from app.services.reorder import move_item
from app.storage.local import ContentAccessor
from app.utils.file_utils import format_file_size, normalize_media_type, slugify_name

logger = configure_logging()


@dataclass(frozen=True)
class IntakeCandidate:
    """ملف خام قادم من الرفع أو السحب والإفلات قبل التحقق من نوعه."""

    name: str
    size_bytes: int
    media_type: str
    last_modified: int
    read: ContentAccessor
    source_path: Optional[Path] = None


@dataclass(frozen=True)
class StagedDocument:
    id: str
    name: str
    size_bytes: int
    mime_type: str
    last_modified: int
    content_accessor: ContentAccessor = field(repr=False, compare=False)
    source_path: Optional[Path] = field(default=None, repr=False, compare=False)

    async def read(self) -> bytes:
        return await self.content_accessor()

    def to_card(self) -> dict:
        return {
            "document_id": self.id,
            "filename": self.name,
            "size_bytes": self.size_bytes,
            "size_label": format_file_size(self.size_bytes),
            "media_type": self.mime_type,
            "last_modified": self.last_modified,
        }


class IntakeResult(NamedTuple):
    accepted: List[StagedDocument]
    rejected: List[IntakeCandidate]


def new_document_id(name: str) -> str:
    """معرف يجمع اسم الملف مع طابع زمني رتيب وجزء عشوائي."""
    return f"{slugify_name(name)}-{time.monotonic_ns()}-{uuid4().hex[:8]}"


class StagingRegistry:
    """قائمة مرتبة بالملفات المجهزة للدمج؛ الترتيب فيها هو ترتيب الدمج."""

    def __init__(self, accepted_media_type: str = "application/pdf") -> None:
        self.accepted_media_type = normalize_media_type(accepted_media_type)
        self._documents: List[StagedDocument] = []
        self._issued: Set[str] = set()

    def __len__(self) -> int:
        return len(self._documents)

    def accepts(self, candidate: IntakeCandidate) -> bool:
        return normalize_media_type(candidate.media_type) == self.accepted_media_type

    def _issue_id(self, name: str) -> str:
        document_id = new_document_id(name)
        while document_id in self._issued:
            document_id = new_document_id(name)
        self._issued.add(document_id)
        return document_id

    def intake(self, candidates: Sequence[IntakeCandidate]) -> IntakeResult:
        """
        إضافة دفعة من الملفات إلى نهاية القائمة بنفس ترتيبها.

        الدفعة تُقبل كاملة أو تُرفض كاملة: إذا لم يطابق أي ملف النوع المطلوب
        لا يُضاف شيء ويُرفع خطأ واحد يضم كل الملفات المرفوضة.
        """
        rejected = [candidate for candidate in candidates if not self.accepts(candidate)]
        if rejected:
            logger.warning(
                "رفض دفعة من %s ملفات بسبب نوع غير مدعوم: %s",
                len(candidates),
                ", ".join(candidate.name for candidate in rejected),
            )
            raise InvalidInputError(rejected)

        accepted = [
            StagedDocument(
                id=self._issue_id(candidate.name),
                name=candidate.name,
                size_bytes=candidate.size_bytes,
                mime_type=normalize_media_type(candidate.media_type),
                last_modified=candidate.last_modified,
                content_accessor=candidate.read,
                source_path=candidate.source_path,
            )
            for candidate in candidates
        ]
        self._documents.extend(accepted)
        logger.info("تمت إضافة %s ملفات إلى قائمة الدمج", len(accepted))
        return IntakeResult(accepted=accepted, rejected=[])

    def remove(self, document_id: str) -> None:
        before = len(self._documents)
        self._documents = [document for document in self._documents if document.id != document_id]
        if len(self._documents) != before:
            logger.info("تمت إزالة الملف %s من قائمة الدمج", document_id)

    def list(self) -> tuple[StagedDocument, ...]:
        return tuple(self._documents)

    def ids(self) -> List[str]:
        return [document.id for document in self._documents]

    def find(self, document_id: str) -> Optional[StagedDocument]:
        for document in self._documents:
            if document.id == document_id:
                return document
        return None

    def get(self, document_id: str) -> StagedDocument:
        document = self.find(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def move(self, source_id: str, target_id: str) -> List[str]:
        order = move_item(self.ids(), source_id, target_id)
        by_id = {document.id: document for document in self._documents}
        self._documents = [by_id[document_id] for document_id in order]
        logger.info("إعادة ترتيب: نقل %s إلى موضع %s", source_id, target_id)
        return order
