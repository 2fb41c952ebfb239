"""
Idempotent clean-up of already-written MDX records.

Crawled markdown and PDF text occasionally carry tokens the MDX compiler reads
as JSX (stray ``<>`` fragments, lone angle brackets) or HTML entities that
should be literal characters. ``repair_text`` applies ``REPAIR_RULES`` in
order, repeating until the text stops changing, so a second pass over
repaired output is always a no-op.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Pattern, Sequence, Tuple

from common.config import yaml_config
from common.logger import get_logger
from ingestion.errors import RecordWriteError
from ingestion.mdx_writer import atomic_write_text

log = get_logger(__name__)

RepairRule = Tuple[str, Pattern[str], str]

REPAIR_RULES: List[RepairRule] = [
    ("lone-fragment-line", re.compile(r"^[ \t]*<>[ \t]*(?:\n|$)", re.M), ""),
    ("trailing-fragment", re.compile(r"<>[ \t]*$", re.M), ""),
    ("trailing-closing-fragment", re.compile(r"</>[ \t]*$", re.M), ""),
    ("nbsp-entity", re.compile(r"&nbsp;"), " "),
    ("amp-entity", re.compile(r"&amp;"), "&"),
    ("lt-entity", re.compile(r"&lt;"), "<"),
    ("gt-entity", re.compile(r"&gt;"), ">"),
    ("lone-open-bracket-line", re.compile(r"^[ \t]*<[ \t]*(?:\n|$)", re.M), ""),
    ("lone-close-bracket-line", re.compile(r"^[ \t]*>[ \t]*(?:\n|$)", re.M), ""),
]


def _apply_once(text: str, rules: Sequence[RepairRule]) -> str:
    for _name, pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def repair_text(text: str, rules: Sequence[RepairRule] = REPAIR_RULES) -> str:
    # Every rule shortens the text or leaves it alone, so this terminates.
    while True:
        fixed = _apply_once(text, rules)
        if fixed == text:
            return fixed
        text = fixed


@dataclass
class RepairReport:
    fixed: List[Path] = field(default_factory=list)
    unchanged: int = 0
    failed: List[Path] = field(default_factory=list)
    missing_dirs: List[Path] = field(default_factory=list)

    @property
    def total_fixed(self) -> int:
        return len(self.fixed)


def repair_file(path: Path) -> bool:
    """Rewrite ``path`` in place if repairing changes it. Returns True when rewritten."""
    content = path.read_text(encoding="utf-8")
    fixed = repair_text(content)
    if fixed == content:
        return False
    atomic_write_text(path, fixed)
    return True


def default_directories() -> List[Path]:
    return [yaml_config.app.crawl_output_dir, yaml_config.app.pdf_output_dir]


def repair_directories(
    directories: Iterable[Path] | None = None, ext: str | None = None
) -> RepairReport:
    ext = ext or yaml_config.app.output_ext
    report = RepairReport()

    for directory in directories or default_directories():
        directory = Path(directory)
        if not directory.is_dir():
            log.info("Skipping non-existent directory: %s", directory)
            report.missing_dirs.append(directory)
            continue

        files = sorted(directory.glob(f"*.{ext}"))
        log.info("Checking %d files in %s", len(files), directory.name)
        for path in files:
            try:
                changed = repair_file(path)
            except (OSError, UnicodeDecodeError, RecordWriteError) as e:
                log.error("Could not repair %s: %s", path.name, e, exc_info=True)
                report.failed.append(path)
                continue
            if changed:
                log.info("Fixed: %s", path.name)
                report.fixed.append(path)
            else:
                report.unchanged += 1

    log.info(
        "Fixed %d files with MDX syntax issues (%d unchanged, %d failed)",
        report.total_fixed,
        report.unchanged,
        len(report.failed),
    )
    return report
