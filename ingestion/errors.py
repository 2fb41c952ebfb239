from __future__ import annotations

from pathlib import Path


class IngestionError(Exception):
    """Base class for every error raised by the conversion pipeline."""


class SourceMissingError(IngestionError):
    """An expected input directory or file does not exist."""

    def __init__(self, path: Path, what: str = "input"):
        self.path = Path(path)
        super().__init__(f"No {what} found at: {self.path}")


class SourceEmptyError(IngestionError):
    """The input exists but holds zero usable records."""


class PdfExtractionError(IngestionError):
    """pypdf could not read a PDF file."""


class RecordWriteError(IngestionError):
    """Persisting a single DocumentRecord failed."""

    def __init__(self, path: Path, cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to write {self.path.name}: {cause}")
