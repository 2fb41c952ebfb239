from __future__ import annotations

from typing import List

from common.config import yaml_config

PARAGRAPH_SEPARATOR = "\n\n"


def split_into_sections(text: str, max_length: int | None = None) -> List[str]:
    """
    Greedily pack paragraphs into sections of at most ``max_length`` characters.

    Paragraphs are never split or reordered: a single paragraph longer than the
    limit becomes its own oversized section. Sections are only right-trimmed, so
    an indented paragraph (e.g. a markdown code block) that opens a section keeps
    its indentation and joining the sections with the separator rebuilds ``text``
    for input without trailing whitespace before paragraph breaks.
    """
    max_length = max_length or yaml_config.conversion.max_section_length
    sections: List[str] = []
    buf = ""

    for paragraph in text.split(PARAGRAPH_SEPARATOR):
        if buf and len(buf) + len(paragraph) + len(PARAGRAPH_SEPARATOR) > max_length:
            sections.append(buf.rstrip())
            buf = paragraph
        else:
            buf = f"{buf}{PARAGRAPH_SEPARATOR}{paragraph}" if buf else paragraph

    # flush last buffer
    if buf.strip():
        sections.append(buf.rstrip())
    return sections
