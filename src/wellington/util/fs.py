"""Directory scanner: post directories under a blog root and their timestamps"""

from datetime import datetime, timezone
from pathlib import Path

from wellington.core.models import DiscoveredPost
from wellington.errors import DirectoryReadError


POST_SOURCE = "index.md"
POST_OUTPUT = "index.html"


def mtime(path: Path) -> datetime:
    return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)


def list_posts(root: Path) -> list[DiscoveredPost]:
    """Return immediate subdirectories of root holding an index.md, sorted by name.

    Directories without the marker file are skipped; unreadable entries raise
    DirectoryReadError.
    """
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DirectoryReadError(root) from e

    posts = []
    for entry in entries:
        try:
            if not entry.is_dir():
                continue
            source = entry / POST_SOURCE
            if not source.is_file():
                continue
            posts.append(DiscoveredPost(name=entry.name, last_updated=mtime(source)))
        except OSError as e:
            raise DirectoryReadError(entry) from e
    return posts
