from __future__ import annotations

import re
import time
from abc import ABC, abstractmethod
from pathlib import PurePath
from urllib.parse import urlparse

from common.config import yaml_config
from common.logger import get_logger
from ingestion.document_models import Category

log = get_logger(__name__)

_NON_SLUG_CHAR_RE = re.compile(r"[^a-z0-9-]")
_NON_ALNUM_RUN_RE = re.compile(r"[^a-z0-9]+")
_HYPHEN_RUN_RE = re.compile(r"-+")


class IdentifierStrategy(ABC):
    """Derives a stable, lowercase, hyphen-delimited slug from a source reference."""

    def __init__(self, prefix: str):
        self.prefix = prefix

    @abstractmethod
    def generate(self, source: str) -> str:
        ...

    def part(self, base: str, index: int) -> str:
        return f"{base}-part-{index}"


class UrlIdentifier(IdentifierStrategy):
    """
    Slug from a URL path: ``https://hyrox.com/find-my-race/`` -> ``hyrox-find-my-race``.
    The site root maps to ``<prefix>-home``.
    """

    def generate(self, source: str) -> str:
        try:
            parsed = urlparse(source)
            if not parsed.scheme or not parsed.netloc:
                raise ValueError(f"not an absolute URL: {source!r}")
        except ValueError as e:
            # Fallback identifiers are not reproducible across runs.
            fallback = f"{self.prefix}-page-{int(time.time() * 1000)}"
            log.warning("Unparseable source URL (%s); using %s", e, fallback)
            return fallback

        path = parsed.path.strip("/")
        slug = path.replace("/", "-").lower()
        slug = _NON_SLUG_CHAR_RE.sub("-", slug)
        slug = _HYPHEN_RUN_RE.sub("-", slug).strip("-")
        return f"{self.prefix}-{slug or 'home'}"


class FilenameIdentifier(IdentifierStrategy):
    """Slug from a file name: ``HYROX_Rulebook EN.pdf`` -> ``pdf-hyrox-rulebook-en``."""

    def generate(self, source: str) -> str:
        stem = PurePath(source).stem.lower()
        slug = _NON_ALNUM_RUN_RE.sub("-", stem).strip("-")
        return f"{self.prefix}-{slug}"


def strategy_for(category: Category) -> IdentifierStrategy:
    if category is Category.CRAWL:
        return UrlIdentifier(yaml_config.conversion.domain_tag)
    return FilenameIdentifier(yaml_config.conversion.pdf_tag)
