from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Category(str, Enum):
    CRAWL = "crawl"
    PDF = "pdf"


@dataclass(frozen=True)
class PageMetadata:
    source_url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    published_at: Optional[str] = None


@dataclass(frozen=True)
class RawPage:
    body: str  # crawled markdown
    metadata: PageMetadata = field(default_factory=PageMetadata)


@dataclass(frozen=True)
class RawPdfExtract:
    body: str  # raw extracted text, pages joined by blank lines
    page_count: int
    source_filename: str
    info: Dict[str, Any] = field(default_factory=dict)  # PDF document-info dict


@dataclass
class DocumentRecord:
    identifier: str  # slug, also the output file stem
    title: str
    description: str
    body: str
    source_ref: str  # URL for crawl pages, filename for PDFs
    category: Category
    timestamp: str
    part_index: Optional[int] = None  # 1-based
    part_count: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)  # rendered into the meta header
    base_identifier: str = ""  # shared by all parts of one source

    @property
    def is_part(self) -> bool:
        return self.part_index is not None

    @property
    def stem(self) -> str:
        return self.base_identifier or self.identifier

    def filename(self, ext: str) -> str:
        return f"{self.identifier}.{ext}"
