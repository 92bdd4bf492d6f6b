"""Intermediate data models for the conversion pipeline"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ConvertedPost:
    """Rendered article body plus the title learned from its first level-1 header."""
    body: str
    title: Optional[str] = None


@dataclass(frozen=True)
class DiscoveredPost:
    """A post directory found on disk; not persisted."""
    name:         str
    last_updated: datetime     # mtime of the post's index.md
