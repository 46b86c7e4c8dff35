from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """إعدادات خدمة الدمج مع تحميل القيم من ملف .env عند توفره."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[2] / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "PDF Merge Studio"
    app_version: str = "0.1.0"

    base_dir: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2])
    storage_dir: Optional[Path] = None
    temp_dir: Optional[Path] = None

    accepted_media_type: str = "application/pdf"
    output_extension: str = "pdf"
    session_ttl_minutes: int = 120
    log_level: str = "INFO"

    allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    allow_credentials: bool = False

    def configure_paths(self) -> None:
        """تهيئة المسارات الافتراضية وإنشاء المجلدات في حال غيابها."""
        self.storage_dir = (self.storage_dir or (self.base_dir / "outputs")).resolve()
        self.temp_dir = (self.temp_dir or (self.storage_dir / "tmp")).resolve()

        for directory in (self.storage_dir, self.temp_dir):
            directory.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    settings.configure_paths()
    return settings
