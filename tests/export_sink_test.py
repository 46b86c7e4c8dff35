import pytest

from app.core.errors import SourceReadError
from app.services import export_sink as export_sink_module
from app.services.export_sink import ExportSink
from app.storage.local import LocalStorage
from app.storage.registry import StagingRegistry
from conftest import CountingAccessor


@pytest.fixture
def sink(tmp_path):
    return ExportSink(LocalStorage(base_dir=tmp_path))


def _temp_files(sink):
    return [path for path in sink.storage.temp_dir.iterdir() if path.is_file()]


def _scope():
    return {"type": "http", "method": "GET", "path": "/", "headers": []}


async def _receive():
    return {"type": "http.disconnect"}


@pytest.mark.asyncio
async def test_export_artifact_is_an_attachment_released_after_sending(sink, pdf_a):
    response = sink.export_artifact(pdf_a, "merged_20240305.pdf")
    messages = []

    async def _send(message):
        messages.append(message)

    assert response.media_type == "application/pdf"
    assert response.headers["content-disposition"] == 'attachment; filename="merged_20240305.pdf"'
    assert len(_temp_files(sink)) == 1

    await response(_scope(), _receive, _send)

    body = b"".join(message.get("body", b"") for message in messages if message["type"] == "http.response.body")
    assert body == pdf_a
    assert _temp_files(sink) == []


@pytest.mark.asyncio
async def test_export_artifact_is_released_when_sending_fails(sink, pdf_a):
    response = sink.export_artifact(pdf_a, "out.pdf")

    async def _send(message):
        if message["type"] == "http.response.body":
            raise OSError("client went away")

    with pytest.raises(OSError):
        await response(_scope(), _receive, _send)

    assert _temp_files(sink) == []


def test_export_artifact_releases_buffer_when_hand_off_fails(sink, pdf_a, monkeypatch):
    def _broken(*args, **kwargs):
        raise RuntimeError("download failed")

    monkeypatch.setattr(export_sink_module, "ArtifactResponse", _broken)

    with pytest.raises(RuntimeError):
        sink.export_artifact(pdf_a, "out.pdf")

    assert _temp_files(sink) == []


@pytest.mark.asyncio
async def test_preview_one_opens_inline(sink, make_candidate, pdf_a):
    registry = StagingRegistry()
    registry.intake([make_candidate("a.pdf", data=pdf_a)])

    response = await sink.preview_one(registry.list()[0])

    async def _send(message):
        pass

    assert response.headers["content-disposition"] == 'inline; filename="a.pdf"'
    await response(_scope(), _receive, _send)
    assert _temp_files(sink) == []


@pytest.mark.asyncio
async def test_preview_one_reports_read_failures(sink, make_candidate):
    registry = StagingRegistry()
    registry.intake([make_candidate("a.pdf", accessor=CountingAccessor(error=OSError("disk")))])

    with pytest.raises(SourceReadError):
        await sink.preview_one(registry.list()[0])

    assert _temp_files(sink) == []
