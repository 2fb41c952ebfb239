from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import orjson
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from common.logger import get_logger
from ingestion.document_models import PageMetadata, RawPage, RawPdfExtract
from ingestion.errors import PdfExtractionError, SourceEmptyError, SourceMissingError

log = get_logger(__name__)


def latest_crawl_file(crawl_dir: Path) -> Path:
    """
    Pick the most recent crawl dump. Crawl files are named with an ISO
    timestamp, so the lexicographically greatest ``.json`` name is the latest.
    """
    crawl_dir = Path(crawl_dir)
    if not crawl_dir.is_dir():
        raise SourceMissingError(crawl_dir, "crawl data directory")

    files = sorted((p for p in crawl_dir.iterdir() if p.suffix == ".json"), reverse=True)
    if not files:
        raise SourceMissingError(crawl_dir, "crawl data files")
    return files[0]


def _page_from_item(item: Dict[str, Any]) -> RawPage:
    meta = item.get("metadata") or {}
    return RawPage(
        body=item.get("markdown") or "",
        metadata=PageMetadata(
            source_url=meta.get("sourceURL") or meta.get("url"),
            title=meta.get("title"),
            description=meta.get("description") or meta.get("ogDescription"),
            published_at=meta.get("publishedTime") or meta.get("modifiedTime"),
        ),
    )


def load_crawl_pages(path: Path) -> List[RawPage]:
    """Parse a crawl dump of the form ``{"data": [{"markdown": ..., "metadata": {...}}]}``."""
    try:
        payload = orjson.loads(Path(path).read_bytes())
    except orjson.JSONDecodeError as e:
        raise SourceEmptyError(f"Crawl data in {path} is not valid JSON: {e}") from e

    items = payload.get("data") if isinstance(payload, dict) else None
    if not items:
        raise SourceEmptyError(f"No pages found in crawl data: {path}")

    pages = [_page_from_item(item) for item in items if isinstance(item, dict)]
    if not pages:
        raise SourceEmptyError(f"No parseable pages in crawl data: {path}")
    return pages


def discover_pdfs(pdf_dir: Path) -> List[Path]:
    pdf_dir = Path(pdf_dir)
    if not pdf_dir.is_dir():
        raise SourceMissingError(pdf_dir, "PDF directory")

    paths = sorted(p for p in pdf_dir.iterdir() if p.is_file() and p.suffix.lower() == ".pdf")
    if not paths:
        raise SourceEmptyError(f"No PDF files found in {pdf_dir}")
    return paths


def _document_info(reader: PdfReader) -> Dict[str, Any]:
    if not reader.metadata:
        return {}
    return {str(k).lstrip("/"): str(v) for k, v in reader.metadata.items() if v is not None}


def extract_pdf(path: Path) -> RawPdfExtract:
    """Extract the text of every page with pypdf; pages are joined by a blank line."""
    path = Path(path)
    try:
        reader = PdfReader(str(path))
        texts = [page.extract_text() or "" for page in reader.pages]
        info = _document_info(reader)
    except PdfReadError as e:
        raise PdfExtractionError(f"Corrupt or invalid PDF {path.name}: {e}") from e
    except Exception as e:
        raise PdfExtractionError(f"Failed to read PDF {path.name}: {e}") from e

    if not any(t.strip() for t in texts):
        log.warning("No extractable text in %s (may be scanned/image-based)", path.name)

    return RawPdfExtract(
        body="\n\n".join(texts),
        page_count=len(texts),
        source_filename=path.name,
        info=info,
    )
