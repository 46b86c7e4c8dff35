import math
import re
from pathlib import Path
from typing import Iterable, Optional

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")
_SLUG_PATTERN = re.compile(r"[^A-Za-z0-9._-]+")


def format_file_size(size_bytes: int) -> str:
    """تحويل الحجم بالبايت إلى نص مقروء مثل 1.5 KB."""
    if size_bytes <= 0:
        return "0 Bytes"

    index = 0
    while size_bytes >= math.pow(1024, index + 1) and index < len(_SIZE_UNITS) - 1:
        index += 1
    value = size_bytes / math.pow(1024, index)
    label = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{label} {_SIZE_UNITS[index]}"


def normalize_media_type(value: Optional[str]) -> str:
    """إرجاع نوع الوسائط بأحرف صغيرة دون المعاملات (مثل charset)."""
    return (value or "").split(";", 1)[0].strip().lower()


def slugify_name(name: str, fallback: str = "document") -> str:
    slug = _SLUG_PATTERN.sub("-", name or "").strip("-")
    return slug or fallback


def clean_temp_files(paths: Iterable[Optional[Path]]) -> None:
    for path in paths:
        if path and path.exists():
            path.unlink(missing_ok=True)
