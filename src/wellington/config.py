"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    blog_root:      str = Field(default=".",                    description="Directory holding one subdirectory per post")
    index_file:     str = Field(default=".index.csv",           description="Persisted post index, relative to blog_root")
    meta_file:      str = Field(default=".meta.yaml",           description="Site metadata for the RSS feed, relative to blog_root")
    toc_file:       str = Field(default="index.html",           description="Table of contents, relative to blog_root")
    rss_file:       str = Field(default="rss.xml",              description="RSS feed, relative to blog_root")
    rss_items:      int = Field(default=10, ge=0,               description="Posts in the RSS feed; 0 disables the feed")
    parser_config:  str = Field(default="gfm-like",             description="MarkdownIt parser preset name")
    post_template:  str = Field(default=".post_template.html",  description="Post page template, relative to blog_root")
    index_template: str = Field(default=".index_template.html", description="Table of contents template, relative to blog_root")
    rss_template:   str = Field(default=".rss_template.xml",    description="RSS feed template, relative to blog_root")
    log_level:      str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @property
    def root(self) -> Path:
        return Path(self.blog_root)


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then WELLINGTON_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"WELLINGTON_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
