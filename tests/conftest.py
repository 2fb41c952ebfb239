from pathlib import Path
from typing import Any, Dict, List

import orjson
import pytest

# ~994 characters, no banner vocabulary
PARAGRAPH = ("word " * 199).strip()


@pytest.fixture
def long_body() -> str:
    """Seven paragraphs (~7000 chars) that pack into three 3000-char sections."""
    return "\n\n".join([PARAGRAPH] * 7)


@pytest.fixture
def write_crawl_dump(tmp_path: Path):
    def _write(items: List[Dict[str, Any]], name: str = "hyrox-crawl-2025-01-01T00-00-00.json") -> Path:
        crawl_dir = tmp_path / "crawl"
        crawl_dir.mkdir(exist_ok=True)
        path = crawl_dir / name
        path.write_bytes(orjson.dumps({"data": items}))
        return path

    return _write
