import re

import pytest

from ingestion import identifiers
from ingestion.document_models import Category
from ingestion.identifiers import FilenameIdentifier, UrlIdentifier, strategy_for


@pytest.fixture
def urls():
    return UrlIdentifier("hyrox")


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://hyrox.com", "hyrox-home"),
        ("https://hyrox.com/", "hyrox-home"),
        ("https://hyrox.com/find-my-race/", "hyrox-find-my-race"),
        ("https://hyrox.com/Events/Season 25/Berlin_2025/", "hyrox-events-season-25-berlin-2025"),
        ("https://hyrox.com/faq/?lang=de#top", "hyrox-faq"),
        ("https://hyrox.com//a--b//", "hyrox-a-b"),
    ],
)
def test_url_slugs(urls, url, expected):
    assert urls.generate(url) == expected


def test_url_slug_is_deterministic(urls):
    url = "https://hyrox.com/the-fitness-race/workout"
    assert {urls.generate(url) for _ in range(5)} == {"hyrox-the-fitness-race-workout"}


@pytest.mark.parametrize("bad", ["not a url", "", "http://[::1"])
def test_unparseable_url_falls_back_to_time_based_id(urls, monkeypatch, bad):
    monkeypatch.setattr(identifiers.time, "time", lambda: 1700000000.0)
    assert urls.generate(bad) == "hyrox-page-1700000000000"


def test_fallback_id_shape(urls):
    assert re.fullmatch(r"hyrox-page-\d+", urls.generate("/relative/path"))


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("HYROX_Rulebook EN.pdf", "pdf-hyrox-rulebook-en"),
        ("--Weird__Name!!.PDF", "pdf-weird-name"),
        ("docs/2025 Season Guide.pdf", "pdf-2025-season-guide"),
    ],
)
def test_filename_slugs(filename, expected):
    assert FilenameIdentifier("pdf").generate(filename) == expected


def test_strategy_selected_by_category():
    crawl = strategy_for(Category.CRAWL)
    pdf = strategy_for(Category.PDF)

    assert isinstance(crawl, UrlIdentifier) and crawl.prefix == "hyrox"
    assert isinstance(pdf, FilenameIdentifier) and pdf.prefix == "pdf"
    assert pdf.part("pdf-guide", 2) == "pdf-guide-part-2"
