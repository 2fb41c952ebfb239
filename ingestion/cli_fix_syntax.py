from __future__ import annotations

import argparse
from pathlib import Path

from common.config import yaml_config
from ingestion.syntax_repair import repair_directories


def main():
    parser = argparse.ArgumentParser(
        description="Repair MDX syntax artifacts in generated documents (safe to re-run)."
    )
    parser.add_argument(
        "directories",
        nargs="*",
        help="Folders to sweep (defaults to the crawl and PDF output folders)",
    )
    parser.add_argument("--ext", type=str, default=yaml_config.app.output_ext)
    args = parser.parse_args()

    dirs = [Path(d) for d in args.directories] or None
    report = repair_directories(dirs, ext=args.ext)
    if report.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
