from __future__ import annotations

import argparse
from pathlib import Path

from common.logger import get_logger
from ingestion.errors import SourceEmptyError, SourceMissingError
from ingestion.ingest_pipeline import convert_crawl, convert_pdfs

log = get_logger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Convert the latest crawl dump and/or PDFs into MDX documents."
    )
    parser.add_argument(
        "--source",
        type=str,
        default="all",
        choices=["crawl", "pdf", "all"],
        help="Which inputs to convert",
    )
    parser.add_argument(
        "--crawl_dir", type=str, default="", help="Folder with crawl JSON dumps"
    )
    parser.add_argument("--pdf_dir", type=str, default="", help="Folder with PDFs")
    parser.add_argument(
        "--crawl_output_dir", type=str, default="", help="Output folder for crawl pages"
    )
    parser.add_argument(
        "--pdf_output_dir", type=str, default="", help="Output folder for PDF content"
    )
    args = parser.parse_args()

    def _path(value: str) -> Path | None:
        return Path(value) if value else None

    failed = 0
    try:
        if args.source in ("crawl", "all"):
            ctx = convert_crawl(_path(args.crawl_dir), _path(args.crawl_output_dir))
            failed += ctx.failed
        if args.source in ("pdf", "all"):
            ctx = convert_pdfs(_path(args.pdf_dir), _path(args.pdf_output_dir))
            failed += ctx.failed
    except (SourceMissingError, SourceEmptyError) as e:
        log.error("%s", e)
        raise SystemExit(1)

    if failed:
        log.warning("%d records could not be written", failed)
    log.info('Next: run "hyrox-fix-syntax", then regenerate embeddings for the new content')


if __name__ == "__main__":
    main()
