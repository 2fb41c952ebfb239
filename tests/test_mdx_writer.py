import pytest

from ingestion.document_models import Category, DocumentRecord
from ingestion.errors import RecordWriteError
from ingestion.mdx_writer import render_record, write_record


def _record(**overrides) -> DocumentRecord:
    fields = dict(
        identifier="hyrox-faq",
        title="FAQ",
        description="Common questions",
        body="Body text.",
        source_ref="https://hyrox.com/faq/",
        category=Category.CRAWL,
        timestamp="2025-01-02T03:04:05+00:00",
        extra={"sourceUrl": "https://hyrox.com/faq/", "publishedDate": "2024-12-01"},
    )
    fields.update(overrides)
    return DocumentRecord(**fields)


def test_render_crawl_record():
    out = render_record(_record())

    assert out.startswith('export const meta = {\n  title: "FAQ",\n  description: "Common questions",')
    assert '  category: "crawl",\n  timestamp: "2025-01-02T03:04:05+00:00"\n}' in out
    assert "\n\n# FAQ\n\n*Common questions*\n\nBody text.\n\n---\n\n" in out
    assert out.endswith(
        "*Source: [https://hyrox.com/faq/](https://hyrox.com/faq/)*\n*Crawled on: 2025-01-02*\n"
    )


def test_render_escapes_header_strings():
    out = render_record(_record(title='Say "hi"\\now'))
    assert 'title: "Say \\"hi\\"\\\\now"' in out


def test_render_pdf_part():
    rec = _record(
        identifier="pdf-guide-part-2",
        title="Guide - Part 2 of 3",
        description="Part 2 of 3 from guide.pdf (12 pages total)",
        source_ref="guide.pdf",
        category=Category.PDF,
        part_index=2,
        part_count=3,
        extra={"sourceFile": "guide.pdf", "totalPages": 12},
    )
    out = render_record(rec)

    assert "  totalPages: 12,\n" in out
    assert "  part: 2,\n  totalParts: 3,\n" in out
    assert out.endswith(
        "*Source: guide.pdf*\n*Total Pages: 12*\n*Part 2 of 3*\n*Extracted on: 2025-01-02*\n"
    )


def test_render_without_description_omits_line():
    out = render_record(_record(description=""))
    assert "# FAQ\n\nBody text." in out


def test_write_record(tmp_path):
    path = write_record(_record(), tmp_path, "mdx")

    assert path == tmp_path / "hyrox-faq.mdx"
    assert path.read_text(encoding="utf-8") == render_record(_record())
    assert [p.name for p in tmp_path.iterdir()] == ["hyrox-faq.mdx"]


def test_write_failure_raises(tmp_path):
    with pytest.raises(RecordWriteError) as exc:
        write_record(_record(), tmp_path / "missing", "mdx")
    assert exc.value.path.name == "hyrox-faq.mdx"
