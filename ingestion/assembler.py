"""
Turns one cleaned source (crawl page or PDF extract) into DocumentRecords.

A source whose cleaned body is shorter than the category threshold yields no
records. A body that fits in one section yields one record; otherwise every
section becomes its own ``-part-N`` record.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Any, Callable, Dict, List, Optional

from common.config import yaml_config
from ingestion.chunkers import split_into_sections
from ingestion.cleaners import clean_markdown, clean_pdf_text
from ingestion.document_models import (
    Category,
    DocumentRecord,
    RawPage,
    RawPdfExtract,
)
from ingestion.identifiers import strategy_for

_ACRONYMS = {"en": "EN", "pdf": "PDF", "hyrox": "HYROX"}
# PDF document-info keys copied into the meta header
PDF_INFO_FIELDS = (("Title", "documentTitle"), ("Author", "author"))


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def format_pdf_title(filename: str) -> str:
    """``hyrox_rulebook-en.pdf`` -> ``HYROX Rulebook EN``."""
    stem = PurePath(filename).stem
    title = re.sub(r"[_-]", " ", stem)
    title = re.sub(r"\b\w", lambda m: m.group(0).upper(), title)
    return re.sub(
        r"\b(en|pdf|hyrox)\b",
        lambda m: _ACRONYMS[m.group(0).lower()],
        title,
        flags=re.IGNORECASE,
    )


def _assemble(
    body: str,
    *,
    category: Category,
    source_ref: str,
    identifier_source: str,
    title: str,
    timestamp: str,
    max_section_length: Optional[int],
    describe: Callable[[Optional[int], Optional[int]], str],
    extra: Dict[str, Any],
) -> List[DocumentRecord]:
    strategy = strategy_for(category)
    base_id = strategy.generate(identifier_source)
    sections = split_into_sections(body, max_section_length)

    if len(sections) <= 1:
        return [
            DocumentRecord(
                identifier=base_id,
                title=title,
                description=describe(None, None),
                body=body,
                source_ref=source_ref,
                category=category,
                timestamp=timestamp,
                extra=dict(extra),
                base_identifier=base_id,
            )
        ]

    total = len(sections)
    return [
        DocumentRecord(
            identifier=strategy.part(base_id, i),
            title=f"{title} - Part {i} of {total}",
            description=describe(i, total),
            body=section,
            source_ref=source_ref,
            category=category,
            timestamp=timestamp,
            part_index=i,
            part_count=total,
            extra=dict(extra),
            base_identifier=base_id,
        )
        for i, section in enumerate(sections, start=1)
    ]


def assemble_page(
    page: RawPage,
    index: int,
    generated_at: Optional[str] = None,
    min_chars: Optional[int] = None,
    max_section_length: Optional[int] = None,
) -> List[DocumentRecord]:
    """Build records for the ``index``-th (0-based) page of a crawl."""
    generated_at = generated_at or utc_now()
    min_chars = yaml_config.conversion.min_crawl_chars if min_chars is None else min_chars

    body = clean_markdown(page.body)
    if len(body) < min_chars:
        return []

    meta = page.metadata
    url = meta.source_url or ""
    description = meta.description or ""
    published_at = meta.published_at or generated_at

    return _assemble(
        body,
        category=Category.CRAWL,
        source_ref=url,
        identifier_source=url,
        title=meta.title or f"Hyrox Page {index + 1}",
        timestamp=generated_at,
        max_section_length=max_section_length,
        describe=lambda part, total: description,
        extra={"sourceUrl": url, "publishedDate": published_at},
    )


def assemble_pdf(
    extract: RawPdfExtract,
    generated_at: Optional[str] = None,
    min_chars: Optional[int] = None,
    max_section_length: Optional[int] = None,
) -> List[DocumentRecord]:
    generated_at = generated_at or utc_now()
    min_chars = yaml_config.conversion.min_pdf_chars if min_chars is None else min_chars

    body = clean_pdf_text(extract.body)
    if len(body) < min_chars:
        return []

    filename = PurePath(extract.source_filename).name
    pages = extract.page_count
    extra: Dict[str, Any] = {"sourceFile": filename, "totalPages": pages}
    for key, field_name in PDF_INFO_FIELDS:
        value = (extract.info.get(key) or "").strip()
        if value:
            extra[field_name] = value

    def describe(part: Optional[int], total: Optional[int]) -> str:
        if part is None:
            return f"Content extracted from {filename} ({pages} pages)"
        return f"Part {part} of {total} from {filename} ({pages} pages total)"

    return _assemble(
        body,
        category=Category.PDF,
        source_ref=filename,
        identifier_source=filename,
        title=format_pdf_title(filename),
        timestamp=generated_at,
        max_section_length=max_section_length,
        describe=describe,
        extra=extra,
    )
