from __future__ import annotations

from typing import Any, Sequence

from fastapi import status


class StagingError(Exception):
    """خطأ قابل للاسترداد يُعرض للمستخدم كإشعار واحد دون تعديل حالة الجلسة."""

    kind: str = "staging_error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    title: str = "خطأ"
    description: str = "تعذر إتمام العملية. يرجى المحاولة مرة أخرى."

    def __init__(self, description: str | None = None) -> None:
        if description is not None:
            self.description = description
        super().__init__(self.description)

    def to_notification(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "variant": "destructive",
        }


class InvalidInputError(StagingError):
    kind = "invalid_input"
    title = "ملفات غير صالحة"
    description = "يرجى رفع ملفات PDF فقط."

    def __init__(self, rejected: Sequence[Any]) -> None:
        self.rejected = list(rejected)
        super().__init__()


class InsufficientInputError(StagingError):
    kind = "insufficient_input"
    title = "عدد الملفات غير كافٍ"
    description = "يرجى إضافة ملفي PDF على الأقل لإتمام الدمج."

    def __init__(self, staged_count: int) -> None:
        self.staged_count = staged_count
        super().__init__()


class SourceReadError(StagingError):
    kind = "source_read_failure"
    status_code = status.HTTP_502_BAD_GATEWAY
    title = "تعذرت قراءة الملف"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"تعذرت قراءة محتوى الملف {name}.")


class SourceParseError(StagingError):
    kind = "source_parse_failure"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    title = "ملف PDF تالف"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"الملف {name} ليس مستند PDF صالحًا أو أنه محمي بكلمة مرور.")


class MergeInProgressError(StagingError):
    kind = "merge_in_progress"
    status_code = status.HTTP_409_CONFLICT
    title = "عملية دمج قيد التنفيذ"
    description = "يرجى الانتظار حتى تكتمل عملية الدمج الحالية."


class DocumentNotFoundError(StagingError):
    kind = "document_not_found"
    status_code = status.HTTP_404_NOT_FOUND
    title = "الملف غير موجود"

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(f"المعرف {document_id} غير موجود في قائمة الملفات.")
