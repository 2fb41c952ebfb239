from __future__ import annotations

import argparse
from pathlib import Path

import requests

from common.logger import get_logger
from ingestion.crawler import CrawlError, crawl_site

log = get_logger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Crawl a site with Firecrawl and save a timestamped JSON dump."
    )
    parser.add_argument("--url", type=str, default="", help="Site to crawl")
    parser.add_argument("--limit", type=int, default=None, help="Maximum pages")
    parser.add_argument("--output_dir", type=str, default="", help="Dump folder")
    args = parser.parse_args()

    try:
        crawl_site(
            url=args.url or None,
            limit=args.limit,
            output_dir=Path(args.output_dir) if args.output_dir else None,
        )
    except (CrawlError, requests.RequestException) as e:
        log.error("%s", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
