"""Site metadata (feed title, home url, description, author) stored as YAML"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, HttpUrl, ValidationError, field_validator

from wellington.errors import MetaError


class SiteMeta(BaseModel):
    title:       str
    home:        HttpUrl
    description: str = ""
    author:      str = ""

    @field_validator("home")
    @classmethod
    def _home_without_path(cls, v: HttpUrl) -> HttpUrl:
        if v.path not in (None, "", "/"):
            raise ValueError(f"Please provide a URL *without path*, for example {v.scheme}://{v.host}/")
        return v


def make_meta(title: str, home: str, description: str = "", author: str = "") -> SiteMeta:
    try:
        return SiteMeta(title=title, home=home, description=description, author=author)
    except ValidationError as e:
        raise MetaError(f"Invalid site metadata: {e}") from e


def load_meta(path: Path) -> Optional[SiteMeta]:
    """Return site metadata from path, or None if the file does not exist."""
    if not path.exists():
        return None
    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    except (OSError, yaml.YAMLError) as e:
        raise MetaError(f"Couldn't read site metadata {path}. Run `init` again to recreate it: {e}") from e
    try:
        return SiteMeta.model_validate(data)
    except ValidationError as e:
        raise MetaError(f"Couldn't parse site metadata {path}. Run `init` again to recreate it: {e}") from e


def save_meta(path: Path, meta: SiteMeta) -> None:
    text = yaml.safe_dump(meta.model_dump(mode="json"), sort_keys=False, allow_unicode=True)
    try:
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        raise MetaError(f"Couldn't write site metadata {path}: {e}") from e
