from __future__ import annotations

from datetime import datetime
from typing import Optional


def default_name(now: Optional[datetime] = None) -> str:
    """الاسم الافتراضي للملف الناتج بصيغة merged_YYYYMMDD."""
    now = now or datetime.now()
    return f"merged_{now.year:04d}{now.month:02d}{now.day:02d}"


def resolve_output_name(user_input: Optional[str], now: Optional[datetime] = None) -> str:
    # لا يتم تنقية الأحرف الخاصة في الاسم، يُعاد النص بعد إزالة المسافات فقط
    trimmed = (user_input or "").strip()
    return trimmed or default_name(now)


def output_filename(user_input: Optional[str], extension: str = "pdf", now: Optional[datetime] = None) -> str:
    return f"{resolve_output_name(user_input, now)}.{extension.lstrip('.')}"
