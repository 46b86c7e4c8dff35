from io import BytesIO

import pytest
from pypdf import PdfWriter

from app.core.errors import InsufficientInputError, SourceParseError, SourceReadError
from app.services.pdf_service import PDFService
from app.storage.registry import StagingRegistry
from conftest import CountingAccessor, build_pdf, page_widths


def _stage(make_candidate, *items):
    registry = StagingRegistry()
    registry.intake([make_candidate(name, data=data) for name, data in items])
    return registry


@pytest.mark.asyncio
async def test_merge_concatenates_pages_in_registry_order(make_candidate, pdf_a, pdf_b):
    registry = _stage(make_candidate, ("a.pdf", pdf_a), ("b.pdf", pdf_b))

    merged = await PDFService().merge(registry.list())

    assert page_widths(merged) == [101, 102, 103, 201, 202]


@pytest.mark.asyncio
async def test_reordering_before_merge_changes_page_order(make_candidate, pdf_a, pdf_b):
    registry = _stage(make_candidate, ("a.pdf", pdf_a), ("b.pdf", pdf_b))
    a_id, b_id = registry.ids()
    registry.move(b_id, a_id)

    merged = await PDFService().merge(registry.list())

    assert page_widths(merged) == [201, 202, 101, 102, 103]


@pytest.mark.asyncio
async def test_merge_is_repeatable_with_same_input(make_candidate, pdf_a, pdf_b):
    registry = _stage(make_candidate, ("a.pdf", pdf_a), ("b.pdf", pdf_b))
    service = PDFService()

    first = await service.merge(registry.list())
    second = await service.merge(registry.list())

    assert page_widths(first) == page_widths(second)


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, 1])
async def test_merge_requires_two_documents_and_performs_no_io(make_candidate, pdf_a, count):
    accessors = [CountingAccessor(pdf_a) for _ in range(count)]
    registry = StagingRegistry()
    registry.intake([make_candidate(f"{i}.pdf", accessor=accessor) for i, accessor in enumerate(accessors)])

    with pytest.raises(InsufficientInputError) as excinfo:
        await PDFService().merge(registry.list())

    assert excinfo.value.staged_count == count
    assert all(accessor.calls == 0 for accessor in accessors)


@pytest.mark.asyncio
async def test_corrupted_document_fails_whole_merge(make_candidate, pdf_a):
    trailing = CountingAccessor(pdf_a)
    registry = StagingRegistry()
    registry.intake(
        [
            make_candidate("good.pdf", data=pdf_a),
            make_candidate("broken.pdf", data=b"this is not a pdf document"),
            make_candidate("after.pdf", accessor=trailing),
        ]
    )

    with pytest.raises(SourceParseError) as excinfo:
        await PDFService().merge(registry.list())

    assert excinfo.value.name == "broken.pdf"
    assert "broken.pdf" in excinfo.value.description
    assert trailing.calls == 0


@pytest.mark.asyncio
async def test_read_failure_is_reported_as_source_read_error(make_candidate, pdf_a):
    registry = StagingRegistry()
    registry.intake(
        [
            make_candidate("a.pdf", data=pdf_a),
            make_candidate("gone.pdf", accessor=CountingAccessor(error=FileNotFoundError("gone.pdf"))),
        ]
    )

    with pytest.raises(SourceReadError) as excinfo:
        await PDFService().merge(registry.list())

    assert excinfo.value.name == "gone.pdf"
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


@pytest.mark.asyncio
async def test_encrypted_document_without_password_is_a_parse_failure(make_candidate, pdf_a):
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    writer.encrypt(user_password="secret", owner_password="owner")
    buffer = BytesIO()
    writer.write(buffer)

    registry = _stage(make_candidate, ("a.pdf", pdf_a), ("locked.pdf", buffer.getvalue()))

    with pytest.raises(SourceParseError) as excinfo:
        await PDFService().merge(registry.list())

    assert excinfo.value.name == "locked.pdf"


@pytest.mark.asyncio
async def test_page_count_reads_in_memory_document():
    assert await PDFService().page_count(build_pdf([72, 72, 72, 72]), "four.pdf") == 4
