from typing import Any, Dict, List

import pytest

from common.config import CrawlerConfig
from ingestion import crawler
from ingestion.crawler import CrawlError, FirecrawlClient, crawl_site, save_crawl_result
from ingestion.loaders import latest_crawl_file, load_crawl_pages

API = "https://api.test/v1"


class FakeResponse:
    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload

    def raise_for_status(self) -> None:
        pass

    def json(self) -> Dict[str, Any]:
        return self.payload


class FakeSession:
    def __init__(self, payloads: List[Dict[str, Any]]):
        self.headers: Dict[str, str] = {}
        self.payloads = list(payloads)
        self.calls: List[tuple] = []

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url, kwargs))
        return FakeResponse(self.payloads.pop(0))


def _page(url: str) -> Dict[str, Any]:
    return {"markdown": f"content of {url}", "metadata": {"sourceURL": url}}


@pytest.fixture
def config():
    return CrawlerConfig(api_url=API, poll_interval=0, max_wait=5)


def test_crawl_polls_and_follows_pagination(config):
    session = FakeSession(
        [
            {"success": True, "id": "job1"},
            {"status": "scraping", "completed": 1, "total": 3},
            {
                "status": "completed",
                "completed": 3,
                "total": 3,
                "data": [_page("https://hyrox.com/"), _page("https://hyrox.com/a")],
                "next": f"{API}/crawl/job1?skip=2",
            },
            {"data": [_page("https://hyrox.com/b")]},
        ]
    )
    client = FirecrawlClient("secret", config, session=session)

    result = client.crawl("https://hyrox.com", 3)

    assert result["status"] == "completed"
    assert len(result["data"]) == 3
    assert session.headers["Authorization"] == "Bearer secret"
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", f"{API}/crawl")
    assert kwargs["json"]["limit"] == 3
    assert kwargs["json"]["scrapeOptions"] == {
        "formats": ["markdown", "html"],
        "onlyMainContent": True,
    }
    assert session.calls[-1][1] == f"{API}/crawl/job1?skip=2"


def test_rejected_job(config):
    client = FirecrawlClient("k", config, session=FakeSession([{"success": False}]))
    with pytest.raises(CrawlError, match="not accepted"):
        client.crawl("https://hyrox.com", 1)


def test_failed_job(config):
    session = FakeSession([{"success": True, "id": "j"}, {"status": "failed", "error": "boom"}])
    with pytest.raises(CrawlError, match="boom"):
        FirecrawlClient("k", config, session=session).crawl("https://hyrox.com", 1)


def test_timeout(config):
    config.max_wait = 0
    session = FakeSession([{"success": True, "id": "j"}, {"status": "scraping"}])
    with pytest.raises(CrawlError, match="did not finish"):
        FirecrawlClient("k", config, session=session).crawl("https://hyrox.com", 1)


def test_saved_dump_is_picked_up_by_loader(tmp_path):
    old = tmp_path / "hyrox-crawl-2000-01-01T00-00-00-000000Z.json"
    old.write_text('{"data": []}')

    out = save_crawl_result({"data": [_page("https://hyrox.com/x")]}, tmp_path)

    assert latest_crawl_file(tmp_path) == out
    assert load_crawl_pages(out)[0].metadata.source_url == "https://hyrox.com/x"


def test_crawl_site_requires_api_key(monkeypatch, tmp_path):
    monkeypatch.setattr(crawler.secrets, "firecrawl_api_key", None)
    with pytest.raises(CrawlError, match="FIRECRAWL_API_KEY"):
        crawl_site(output_dir=tmp_path)


def test_crawl_site_writes_dump(tmp_path):
    session = FakeSession(
        [
            {"success": True, "id": "j"},
            {"status": "completed", "data": [_page("https://hyrox.com/")]},
        ]
    )

    out = crawl_site(
        url="https://hyrox.com", limit=1, output_dir=tmp_path, api_key="k", session=session
    )

    assert out.parent == tmp_path
    assert out.name.startswith("hyrox-crawl-")
    assert len(load_crawl_pages(out)) == 1
