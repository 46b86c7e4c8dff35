import shutil
from pathlib import Path
from typing import IO, Awaitable, Callable, Iterable, Optional
from uuid import uuid4

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.config import get_settings
from app.utils.file_utils import clean_temp_files


ContentAccessor = Callable[[], Awaitable[bytes]]


class LocalStorage:
    """خدمات التخزين المحلية للملفات المرفوعة والملفات المؤقتة للتنزيل والمعاينة."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        settings = get_settings()
        self.base_dir = Path(base_dir or settings.storage_dir)
        self.temp_dir = settings.temp_dir if base_dir is None else self.base_dir / "tmp"

        for directory in (self.base_dir, self.temp_dir):
            directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _generate_filename(suffix: str) -> str:
        suffix = suffix if suffix.startswith(".") else f".{suffix.lstrip('.')}"
        return f"{uuid4().hex}{suffix}"

    def save_upload(self, upload: UploadFile) -> Path:
        suffix = Path(upload.filename or "").suffix or ".bin"
        upload.file.seek(0)
        path = self._save_stream(upload.file, suffix=suffix, directory=self.temp_dir)
        upload.file.seek(0)
        return path

    def _save_stream(self, stream: IO[bytes], *, suffix: str, directory: Path) -> Path:
        target_name = self._generate_filename(suffix)
        target_path = directory / target_name
        with target_path.open("wb") as buffer:
            shutil.copyfileobj(stream, buffer)
        return target_path

    def save_bytes(self, data: bytes, *, suffix: str, directory: Optional[Path] = None) -> Path:
        directory = directory or self.temp_dir
        target_name = self._generate_filename(suffix)
        target_path = directory / target_name
        target_path.write_bytes(data)
        return target_path

    @staticmethod
    def file_accessor(path: Path) -> ContentAccessor:
        """إرجاع دالة غير متزامنة قابلة للتكرار تقرأ محتوى الملف عند الطلب فقط."""

        async def _read() -> bytes:
            return await run_in_threadpool(path.read_bytes)

        return _read

    def cleanup(self, paths: Iterable[Optional[Path]]) -> None:
        clean_temp_files(paths)
