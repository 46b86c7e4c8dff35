from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class StagedDocumentCard(BaseModel):
    document_id: str
    filename: str
    size_bytes: int
    size_label: str
    media_type: str
    last_modified: int


class SessionCard(BaseModel):
    session_id: str
    output_name: str
    default_name: str
    busy: bool
    created_at: datetime
    document_count: int
    documents: List[StagedDocumentCard] = Field(default_factory=list)


class MoveRequest(BaseModel):
    source_id: str = Field(..., description="معرف الملف المسحوب.")
    target_id: str = Field(..., description="معرف الملف الذي أُفلت فوقه.")


class OutputNameRequest(BaseModel):
    output_name: str = Field("", description="اسم الملف الناتج دون الامتداد (فارغ = الاسم الافتراضي).")


class PagePreview(BaseModel):
    document_id: str
    page: int
    page_count: int
    preview: str
