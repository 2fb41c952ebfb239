from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import orjson
import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from common.config import CrawlerConfig, secrets, yaml_config
from common.logger import get_logger
from ingestion.errors import IngestionError

log = get_logger(__name__)


class CrawlError(IngestionError):
    """The crawl service rejected the job, reported failure, or timed out."""


class FirecrawlClient:
    """Minimal client for the Firecrawl v1 crawl endpoints."""

    def __init__(
        self,
        api_key: str,
        config: CrawlerConfig | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or yaml_config.crawler
        self.session = session or requests.Session()
        self.session.headers.update(
            {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        )

    @retry(
        retry=retry_if_exception_type(requests.RequestException),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        resp = self.session.request(method, url, timeout=self.config.timeout, **kwargs)
        resp.raise_for_status()
        return resp.json()

    def start(self, url: str, limit: int) -> str:
        body = {
            "url": url,
            "limit": limit,
            "scrapeOptions": {
                "formats": list(self.config.formats),
                "onlyMainContent": self.config.only_main_content,
            },
        }
        job = self._request("POST", f"{self.config.api_url}/crawl", json=body)
        if not job.get("success") or not job.get("id"):
            raise CrawlError(f"Crawl job was not accepted: {job}")
        return job["id"]

    def wait(self, job_id: str) -> Dict[str, Any]:
        """Poll until the job completes, then gather every page of results."""
        status_url = f"{self.config.api_url}/crawl/{job_id}"
        deadline = time.monotonic() + self.config.max_wait

        while True:
            status = self._request("GET", status_url)
            state = status.get("status")
            if state == "completed":
                break
            if state == "failed":
                raise CrawlError(f"Crawl {job_id} failed: {status.get('error', 'unknown error')}")
            if time.monotonic() >= deadline:
                raise CrawlError(f"Crawl {job_id} did not finish within {self.config.max_wait}s")
            log.info(
                "Crawl %s: %s (%s/%s pages)",
                job_id,
                state,
                status.get("completed", 0),
                status.get("total", "?"),
            )
            time.sleep(self.config.poll_interval)

        pages: List[Dict[str, Any]] = list(status.get("data") or [])
        next_url = status.get("next")
        while next_url:
            batch = self._request("GET", next_url)
            pages.extend(batch.get("data") or [])
            next_url = batch.get("next")

        return {
            "status": state,
            "total": status.get("total", len(pages)),
            "completed": status.get("completed", len(pages)),
            "data": pages,
        }

    def crawl(self, url: str, limit: int) -> Dict[str, Any]:
        job_id = self.start(url, limit)
        log.info("Started crawl %s of %s (limit %d)", job_id, url, limit)
        return self.wait(job_id)


def save_crawl_result(result: Dict[str, Any], output_dir: Path) -> Path:
    """Write ``hyrox-crawl-<timestamp>.json``; names sort chronologically."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    out = output_dir / f"hyrox-crawl-{stamp}.json"
    out.write_bytes(orjson.dumps(result, option=orjson.OPT_INDENT_2))
    return out


def crawl_site(
    url: Optional[str] = None,
    limit: Optional[int] = None,
    output_dir: Optional[Path] = None,
    api_key: Optional[str] = None,
    session: requests.Session | None = None,
) -> Path:
    api_key = api_key or secrets.firecrawl_api_key
    if not api_key:
        raise CrawlError(
            "FIRECRAWL_API_KEY is not set; add it to your environment or .env file"
        )
    cfg = yaml_config.crawler
    client = FirecrawlClient(api_key, cfg, session=session)
    result = client.crawl(url or cfg.base_url, limit or cfg.limit)

    out = save_crawl_result(result, output_dir or yaml_config.app.crawl_dir)
    log.info("Crawl completed: %d pages saved to %s", len(result["data"]), out)
    for page in result["data"][:5]:
        meta = page.get("metadata") or {}
        log.info("  - %s", meta.get("sourceURL") or meta.get("url"))
    return out
