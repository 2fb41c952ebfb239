from __future__ import annotations

import os
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"


class AppConfig(BaseModel):
    crawl_dir: Path = Path("data/hyrox-crawl")
    pdf_dir: Path = Path("pages/docs/pdfs")
    crawl_output_dir: Path = Path("pages/docs/hyrox")
    pdf_output_dir: Path = Path("pages/docs/pdf-content")
    output_ext: str = "mdx"


class ConversionConfig(BaseModel):
    max_section_length: int = Field(default=3000, gt=0)
    min_crawl_chars: int = 50
    min_pdf_chars: int = 100
    domain_tag: str = "hyrox"
    pdf_tag: str = "pdf"


class CrawlerConfig(BaseModel):
    base_url: str = "https://hyrox.com"
    api_url: str = "https://api.firecrawl.dev/v1"
    limit: int = 100
    formats: List[str] = Field(default_factory=lambda: ["markdown", "html"])
    only_main_content: bool = True
    poll_interval: float = 2.0
    max_wait: float = 600.0
    timeout: int = 30


class GlobalYAMLConfig(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)


def load_yaml_config(path: Path | None = None) -> GlobalYAMLConfig:
    path = path or Path(os.environ.get("HYROX_CONFIG", DEFAULT_CONFIG_PATH))
    if not path.exists():
        return GlobalYAMLConfig()
    with open(path, "r") as f:
        raw = yaml.safe_load(f)
    return GlobalYAMLConfig(**(raw or {}))


class Secrets(BaseSettings):
    firecrawl_api_key: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


yaml_config = load_yaml_config()
secrets = Secrets()
