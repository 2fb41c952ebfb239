"""
Text cleaning for crawled markdown and PDF-extracted text.

Both cleaners are ordered rule tables so each rule can be inspected and tested
on its own:

- ``BOILERPLATE_RULES``: per-line ``(name, predicate, action)`` entries; the
  first rule whose predicate matches decides whether the line is kept.
- ``PDF_RULES``: whole-text ``(name, transform)`` entries applied in order.

The boilerplate filter is a heuristic. Known limitations:
  * body text that mentions "consent" or "privacy" right after a banner is
    treated as part of the banner and dropped;
  * a content line mentioning "Essential", "Functional" or "Marketing" that
    ends a banner run is dropped with it;
  * a legitimate line containing both "Privacy policy" and "Legal Notice"
    is classified as banner text;
  * banners phrased differently from the markers below are not detected.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

# Every substring in a tuple must appear on the line for the marker to match.
BANNER_MARKERS: Tuple[Tuple[str, ...], ...] = (
    ("Skip to consent choices",),
    ("Privacy preferences",),
    ("We use cookies and similar technologies",),
    ("The data processing may take place with your consent",),
    ("Some services process personal data in unsecure third countries",),
    ("You are under 16 years old? Then you cannot consent",),
    ("Privacy policy", "Legal Notice"),
    ("WordPress Cookie Plugin",),
    ("Accept all", "Continue without consent"),
)
CATEGORY_LABELS: Tuple[str, ...] = ("Essential", "Functional", "Marketing")
GDPR_CITATION = "Art. 49 (1) (a) GDPR"

_BLANK_RUN_RE = re.compile(r"\n{3,}")


# ---------- Boilerplate filter ----------
@dataclass
class BannerState:
    in_boilerplate: bool = False


LineRule = Tuple[str, Callable[[str, BannerState], bool], Callable[[str, BannerState], bool]]


def is_banner_line(line: str) -> bool:
    if line.strip() in CATEGORY_LABELS:
        return True
    return any(all(part in line for part in marker) for marker in BANNER_MARKERS)


def is_gdpr_citation(line: str) -> bool:
    return GDPR_CITATION in line


def looks_like_content(line: str) -> bool:
    if line.startswith("#"):
        return True
    return bool(line.strip()) and "consent" not in line and "privacy" not in line


def mentions_category_label(line: str) -> bool:
    return any(label in line for label in CATEGORY_LABELS)


def _enter_boilerplate(line: str, state: BannerState) -> bool:
    state.in_boilerplate = True
    return False


def _drop(line: str, state: BannerState) -> bool:
    return False


def _keep(line: str, state: BannerState) -> bool:
    return True


def _leave_boilerplate(line: str, state: BannerState) -> bool:
    state.in_boilerplate = False
    return not mentions_category_label(line)


BOILERPLATE_RULES: List[LineRule] = [
    ("banner-marker", lambda line, st: is_banner_line(line), _enter_boilerplate),
    ("gdpr-citation", lambda line, st: is_gdpr_citation(line), _drop),
    (
        "banner-exit",
        lambda line, st: st.in_boilerplate and looks_like_content(line),
        _leave_boilerplate,
    ),
    ("inside-banner", lambda line, st: st.in_boilerplate, _drop),
    ("content", lambda line, st: True, _keep),
]


def filter_lines(
    lines: Sequence[str], rules: Sequence[LineRule] = BOILERPLATE_RULES
) -> List[str]:
    state = BannerState()
    kept: List[str] = []
    for line in lines:
        for _name, predicate, action in rules:
            if predicate(line, state):
                if action(line, state):
                    kept.append(line)
                break
    return kept


def collapse_blank_runs(text: str) -> str:
    return _BLANK_RUN_RE.sub("\n\n", text)


def clean_markdown(markdown: str) -> str:
    """Strip consent/privacy banner runs from crawled markdown."""
    kept = filter_lines(markdown.split("\n"))
    return collapse_blank_runs("\n".join(kept)).strip()


# ---------- PDF text normalizer ----------
TextRule = Tuple[str, Callable[[str], str]]


def _trim_lines(text: str) -> str:
    return "\n".join(line.strip() for line in text.split("\n"))


PDF_RULES: List[TextRule] = [
    ("collapse-spaces", lambda s: re.sub(r" {2,}", " ", s)),
    ("collapse-blank-runs", collapse_blank_runs),
    ("drop-page-numbers", lambda s: re.sub(r"^[ \t]*[0-9]+[ \t]*$", "", s, flags=re.M)),
    (
        "drop-page-of-footers",
        lambda s: re.sub(r"^[ \t]*Page [0-9]+ of [0-9]+[ \t]*$", "", s, flags=re.M),
    ),
    ("trim-lines", _trim_lines),
    ("collapse-blank-runs-again", collapse_blank_runs),
    ("trim", str.strip),
]


def clean_pdf_text(text: str, rules: Sequence[TextRule] = PDF_RULES) -> str:
    """Remove page-number artifacts and collapse whitespace in extracted PDF text."""
    for _name, transform in rules:
        text = transform(text)
    return text
