"""RSS feed records built from site metadata and the blog index"""

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any
from urllib.parse import urljoin

from wellington.crud.meta import SiteMeta
from wellington.crud.models import IndexedBlogPost


RSS_ITEMS = 10


def rss_record(meta: SiteMeta, posts: list[IndexedBlogPost], limit: int = RSS_ITEMS) -> dict[str, Any]:
    """Feed record: the last `limit` posts of the index, newest (last appended) first."""
    home = str(meta.home)
    items = []
    for post in reversed(posts):
        if len(items) >= limit:
            break
        items.append({
            "title": post.title,
            "link": urljoin(home, post.post_url),
            "author": meta.author,
            "pub_date": format_datetime(post.first_published),
        })
    return {"meta": meta.model_dump(mode="json"), "posts": items}


def example_rss_record() -> dict[str, Any]:
    meta = SiteMeta(title="bla", home="https://bla.com", description="2", author="3")
    now = datetime.now(timezone.utc)
    post = IndexedBlogPost(post_url="/blog/example/", first_published=now, last_updated=now)
    return rss_record(meta, [post])
