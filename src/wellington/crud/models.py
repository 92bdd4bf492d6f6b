"""Persisted blog index records and the Blog unit of persistence"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class IndexedBlogPost(BaseModel):
    """One known post, keyed by its site-relative url rather than its filesystem path"""
    post_url:        str
    first_published: datetime
    last_updated:    datetime
    title:           Optional[str] = None
    seen_this_sync:  bool = Field(default=False, exclude=True, description="Transient reconciliation marker")

    @field_validator("first_published", "last_updated")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)

    @property
    def name(self) -> str:
        """Post directory name: last component of post_url."""
        return self.post_url.strip('/').rsplit('/', 1)[-1]


class Blog(BaseModel):
    """Blog root, its site-relative index url, and posts in discovery order"""
    path:      Path
    index_url: str
    posts:     list[IndexedBlogPost] = Field(default_factory=list)

    @classmethod
    def new(cls, path: Path) -> "Blog":
        path = Path(path).resolve()
        return cls(path=path, index_url=f"/{path.name}/")

    def post_url(self, name: str) -> str:
        return f"{self.index_url}{name}/"

    def post_dir(self, post: IndexedBlogPost) -> Path:
        return self.path / post.name

    def find(self, post_url: str) -> Optional[IndexedBlogPost]:
        """Linear lookup by post_url; blogs are small."""
        for post in self.posts:
            if post.post_url == post_url:
                return post
        return None
