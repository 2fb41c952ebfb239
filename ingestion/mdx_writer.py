from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List, Tuple

import orjson

from ingestion.document_models import Category, DocumentRecord
from ingestion.errors import RecordWriteError


def _literal(value: Any) -> str:
    """Encode a header value as a JS/JSON literal (strings quoted and escaped)."""
    return orjson.dumps(value).decode("utf-8")


def _meta_fields(record: DocumentRecord) -> List[Tuple[str, Any]]:
    fields: List[Tuple[str, Any]] = [
        ("title", record.title),
        ("description", record.description),
    ]
    fields.extend(record.extra.items())
    fields.append(("category", record.category.value))
    if record.is_part:
        fields.append(("part", record.part_index))
        fields.append(("totalParts", record.part_count))
    fields.append(("timestamp", record.timestamp))
    return fields


def _footer(record: DocumentRecord) -> List[str]:
    date = record.timestamp[:10]
    if record.category is Category.CRAWL:
        ref = record.source_ref
        return [f"*Source: [{ref}]({ref})*", f"*Crawled on: {date}*"]

    lines = [f"*Source: {record.source_ref}*"]
    if "totalPages" in record.extra:
        lines.append(f"*Total Pages: {record.extra['totalPages']}*")
    if record.is_part:
        lines.append(f"*Part {record.part_index} of {record.part_count}*")
    lines.append(f"*Extracted on: {date}*")
    return lines


def render_record(record: DocumentRecord) -> str:
    """Render a record as MDX: meta export, heading, description, body, source footer."""
    meta = ",\n".join(f"  {key}: {_literal(value)}" for key, value in _meta_fields(record))
    parts = [
        f"export const meta = {{\n{meta}\n}}",
        f"# {record.title}",
    ]
    if record.description:
        parts.append(f"*{record.description}*")
    parts.append(record.body)
    parts.append("---")
    parts.append("\n".join(_footer(record)))
    return "\n\n".join(parts) + "\n"


def atomic_write_text(path: Path, content: str) -> None:
    """Write via a temporary sibling so ``path`` is either fully replaced or untouched."""
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        raise RecordWriteError(path, e) from e


def write_record(record: DocumentRecord, output_dir: Path, ext: str) -> Path:
    path = Path(output_dir) / record.filename(ext)
    atomic_write_text(path, render_record(record))
    return path
