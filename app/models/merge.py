from pydantic import BaseModel, Field


class MergeCommitRequest(BaseModel):
    output_filename: str | None = Field(
        default=None,
        description="اسم الملف الناتج لهذه العملية فقط (اختياري، يتجاوز اسم الجلسة).",
    )
