import os
import tempfile
from io import BytesIO

# يجب ضبط مجلد التخزين قبل استيراد أي وحدة من التطبيق
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="pdf_merge_tests_"))

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfReader, PdfWriter

from app.storage.registry import IntakeCandidate


def build_pdf(widths, height: float = 72) -> bytes:
    """مستند بصفحات فارغة؛ عرض كل صفحة يميزها لاختبار ترتيب الصفحات."""
    writer = PdfWriter()
    for width in widths:
        writer.add_blank_page(width=width, height=height)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_widths(data: bytes) -> list:
    return [float(page.mediabox.width) for page in PdfReader(BytesIO(data)).pages]


class CountingAccessor:
    def __init__(self, data: bytes = b"", error: Exception | None = None) -> None:
        self.data = data
        self.error = error
        self.calls = 0

    async def __call__(self) -> bytes:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.data


@pytest.fixture
def pdf_a() -> bytes:
    return build_pdf([101, 102, 103])


@pytest.fixture
def pdf_b() -> bytes:
    return build_pdf([201, 202])


@pytest.fixture
def make_candidate():
    def _make(name: str, data: bytes = b"", media_type: str = "application/pdf", accessor=None) -> IntakeCandidate:
        return IntakeCandidate(
            name=name,
            size_bytes=len(data),
            media_type=media_type,
            last_modified=1700000000000,
            read=accessor or CountingAccessor(data),
        )

    return _make


@pytest.fixture
def client():
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_id(client) -> str:
    response = client.post("/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]
