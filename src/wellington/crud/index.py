"""Index store: header-less CSV persistence of IndexedBlogPost records"""

import csv
import io
import logging
from pathlib import Path

from pydantic import ValidationError

from wellington.crud.models import Blog, IndexedBlogPost
from wellington.errors import IndexParseError, IndexWriteError, NotInitialized

logger = logging.getLogger(__name__)


FIELDS = ("post_url", "first_published", "last_updated", "title")


def parse_index(text: str, path: Path) -> list[IndexedBlogPost]:
    """Parse index CSV text. Raises IndexParseError with the offending line number."""
    posts = []
    reader = csv.reader(io.StringIO(text, newline=''))
    try:
        for row in reader:
            if not row:
                continue
            if len(row) != len(FIELDS):
                raise IndexParseError(path, reader.line_num, f"expected {len(FIELDS)} fields, got {len(row)}")
            data = dict(zip(FIELDS, row))
            data["title"] = data["title"] or None
            try:
                posts.append(IndexedBlogPost.model_validate(data))
            except ValidationError as e:
                raise IndexParseError(path, reader.line_num, str(e)) from e
    except csv.Error as e:
        raise IndexParseError(path, reader.line_num, str(e)) from e
    return posts


def dump_index(posts: list[IndexedBlogPost]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator='\n')
    for p in posts:
        writer.writerow([p.post_url, p.first_published.isoformat(), p.last_updated.isoformat(), p.title or ""])
    return buf.getvalue()


def load_index(path: Path) -> list[IndexedBlogPost]:
    """Load all records from path. FileNotFoundError propagates; callers decide if absence is fatal."""
    text = path.read_text(encoding='utf-8')
    return parse_index(text, path)


def save_index(path: Path, posts: list[IndexedBlogPost]) -> None:
    try:
        path.write_text(dump_index(posts), encoding='utf-8')
    except OSError as e:
        raise IndexWriteError(path) from e
    logger.debug("Saved %d index record(s) to %s", len(posts), path)


def load_blog(root: Path, index_file: str, required: bool = True) -> Blog:
    """Load the Blog rooted at root.

    With required=True a missing index raises NotInitialized (sync must follow
    init); with required=False an empty Blog is returned (first-time listing).
    """
    blog = Blog.new(root)
    index_path = blog.path / index_file
    try:
        blog.posts = load_index(index_path)
    except FileNotFoundError as e:
        if required:
            raise NotInitialized(index_path) from e
        logger.debug("No index at %s; starting empty", index_path)
    except (OSError, UnicodeDecodeError) as e:
        raise IndexParseError(index_path, 0, f"unreadable: {e}") from e
    return blog


def save_blog(blog: Blog, index_file: str) -> None:
    save_index(blog.path / index_file, blog.posts)
