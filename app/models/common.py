from typing import Literal

from pydantic import BaseModel, Field


class Notification(BaseModel):
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    kind: str = Field(..., description="نوع الخطأ الثابت للاستخدام البرمجي.")
    notification: Notification
