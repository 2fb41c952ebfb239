from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from tqdm import tqdm

from common.config import yaml_config
from common.logger import get_logger
from ingestion.assembler import assemble_page, assemble_pdf, utc_now
from ingestion.document_models import Category, DocumentRecord
from ingestion.errors import PdfExtractionError, RecordWriteError
from ingestion.loaders import (
    discover_pdfs,
    extract_pdf,
    latest_crawl_file,
    load_crawl_pages,
)
from ingestion.mdx_writer import write_record

log = get_logger(__name__)


@dataclass
class RunContext:
    """
    State owned by a single conversion run: where records go and how many
    succeeded, were skipped as too short, or failed.
    """

    category: Category
    output_dir: Path
    ext: str = "mdx"
    generated_at: str = field(default_factory=utc_now)
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    written: List[Path] = field(default_factory=list)

    def prepare(self) -> None:
        if not self.output_dir.exists():
            self.output_dir.mkdir(parents=True, exist_ok=True)
            log.info("Created output directory: %s", self.output_dir)

    def remove_stale(self, records: List[DocumentRecord]) -> None:
        """
        Delete outputs an earlier run wrote for the same source under a different
        part count (``<stem>.<ext>`` or ``<stem>-part-<n>.<ext>``).
        """
        stem = records[0].stem
        keep = {r.filename(self.ext) for r in records}
        pattern = re.compile(rf"{re.escape(stem)}(?:-part-\d+)?\.{re.escape(self.ext)}")
        for path in sorted(self.output_dir.iterdir()):
            if path.name in keep or not pattern.fullmatch(path.name):
                continue
            try:
                path.unlink()
            except OSError as e:
                log.warning("Could not remove stale %s: %s", path.name, e)
                continue
            log.info("Removed stale: %s", path.name)

    def persist(self, records: List[DocumentRecord]) -> None:
        if records:
            self.remove_stale(records)
        for record in records:
            try:
                path = write_record(record, self.output_dir, self.ext)
            except RecordWriteError as e:
                self.failed += 1
                log.error("%s", e, exc_info=True)
                continue
            self.succeeded += 1
            self.written.append(path)
            log.info("Created: %s", path.name)

    def log_summary(self) -> None:
        log.info(
            "Conversion summary (%s): %d written, %d skipped (too little content), %d failed -> %s",
            self.category.value,
            self.succeeded,
            self.skipped,
            self.failed,
            self.output_dir,
        )


def convert_crawl(
    crawl_dir: Path | None = None,
    output_dir: Path | None = None,
) -> RunContext:
    """Convert the latest crawl dump into MDX records, one page at a time."""
    crawl_file = latest_crawl_file(crawl_dir or yaml_config.app.crawl_dir)
    log.info("Reading crawl data from: %s", crawl_file.name)
    pages = load_crawl_pages(crawl_file)
    log.info("Found %d pages to convert", len(pages))

    ctx = RunContext(
        category=Category.CRAWL,
        output_dir=Path(output_dir or yaml_config.app.crawl_output_dir),
        ext=yaml_config.app.output_ext,
    )
    ctx.prepare()

    for i, page in enumerate(tqdm(pages, desc="Converting pages")):
        records = assemble_page(page, i, generated_at=ctx.generated_at)
        if not records:
            ctx.skipped += 1
            continue
        ctx.persist(records)

    ctx.log_summary()
    return ctx


def convert_pdfs(
    pdf_dir: Path | None = None,
    output_dir: Path | None = None,
) -> RunContext:
    """Extract, clean and split every PDF in ``pdf_dir`` into MDX records."""
    pdf_paths = discover_pdfs(pdf_dir or yaml_config.app.pdf_dir)
    log.info("Found %d PDF files to convert", len(pdf_paths))

    ctx = RunContext(
        category=Category.PDF,
        output_dir=Path(output_dir or yaml_config.app.pdf_output_dir),
        ext=yaml_config.app.output_ext,
    )
    ctx.prepare()

    for path in tqdm(pdf_paths, desc="Converting PDFs"):
        log.info("Processing: %s", path.name)
        try:
            extract = extract_pdf(path)
        except PdfExtractionError as e:
            ctx.failed += 1
            log.error("Failed to process %s: %s", path.name, e, exc_info=True)
            continue

        records = assemble_pdf(extract, generated_at=ctx.generated_at)
        if not records:
            ctx.skipped += 1
            log.info("Skipped (too little content): %s", path.name)
            continue
        ctx.persist(records)

    ctx.log_summary()
    return ctx
