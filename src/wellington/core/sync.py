"""Sync engine: reconcile post directories against the persisted index.

One pass lists post directories, converts the new and changed ones, drops
index entries whose directory (or index.md) is gone, and only then writes
the table of contents, RSS feed, and index. Any error aborts the pass before
the index is written.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from wellington.config import Settings
from wellington.core.pipeline import convert_file, write_text
from wellington.core.rss import rss_record
from wellington.core.templates import Templates, toc_record
from wellington.crud.index import save_blog
from wellington.crud.meta import load_meta
from wellington.crud.models import Blog, IndexedBlogPost
from wellington.util.fs import POST_OUTPUT, POST_SOURCE, list_posts

logger = logging.getLogger(__name__)


def convert_post(blog: Blog, post: IndexedBlogPost, templates: Templates, settings: Settings) -> None:
    """Render <post>/index.md to <post>/index.html and learn its title into the index entry."""
    post_dir = blog.post_dir(post)
    converted = convert_file(
        post_dir / POST_SOURCE,
        post_dir / POST_OUTPUT,
        link_prefix=post.post_url,
        template=templates.post,
        preset=settings.parser_config,
        post_url=post.post_url,
        index_url=blog.index_url,
        first_published=post.first_published,
        last_updated=post.last_updated,
    )
    post.title = converted.title


def reconcile(
    blog: Blog,
    templates: Optional[Templates],
    settings: Settings,
    force: bool = False,
    dry_run: bool = False,
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Update blog.posts in memory from the post directories on disk.

    Returns (counts, changes); counts has created/updated/removed/unchanged,
    changes lists (status, post_url) for every post that is not unchanged.
    With force every post is reconverted and counted as updated. templates
    may be None for a dry run, which converts nothing.
    """
    counts = {"created": 0, "updated": 0, "removed": 0, "unchanged": 0}
    changes: list[tuple[str, str]] = []

    for post in blog.posts:
        post.seen_this_sync = False

    for found in list_posts(blog.path):
        post_url = blog.post_url(found.name)
        post = blog.find(post_url)
        if post is None:
            now = datetime.now(timezone.utc)
            post = IndexedBlogPost(post_url=post_url, first_published=now, last_updated=now)
            post.seen_this_sync = True
            if not dry_run:
                convert_post(blog, post, templates, settings)
            blog.posts.append(post)
            status = "created"
        elif found.last_updated > post.last_updated or force:
            post.seen_this_sync = True
            post.last_updated = max(found.last_updated, post.last_updated)
            if not dry_run:
                convert_post(blog, post, templates, settings)
            status = "updated"
        else:
            post.seen_this_sync = True
            status = "unchanged"
        counts[status] += 1
        if status != "unchanged":
            changes.append((status, post_url))
            logger.info("%s: %s", status, post_url)

    removed = [p for p in blog.posts if not p.seen_this_sync]
    for post in removed:
        counts["removed"] += 1
        changes.append(("removed", post.post_url))
        logger.info("removed: %s", post.post_url)
    blog.posts = [p for p in blog.posts if p.seen_this_sync]

    return counts, changes


def num_updated(counts: dict[str, int]) -> int:
    return counts.get("created", 0) + counts.get("updated", 0) + counts.get("removed", 0)


def write_outputs(blog: Blog, templates: Templates, settings: Settings) -> None:
    """Render the table of contents (and RSS feed, if site metadata exists) and persist the index."""
    toc = templates.index.render(toc_record(blog.index_url, blog.posts))
    meta = load_meta(blog.path / settings.meta_file)
    rss = None
    if meta is not None and settings.rss_items > 0:
        rss = templates.rss.render(rss_record(meta, blog.posts, settings.rss_items))

    write_text(blog.path / settings.toc_file, toc)
    if rss is not None:
        write_text(blog.path / settings.rss_file, rss)
    save_blog(blog, settings.index_file)


def sync_blog(
    blog: Blog,
    templates: Templates,
    settings: Settings,
    force: bool = False,
    dry_run: bool = False,
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Run one reconciliation pass and persist the results when anything changed (or force)."""
    counts, changes = reconcile(blog, templates, settings, force=force, dry_run=dry_run)
    total = num_updated(counts)
    if dry_run:
        logger.info("Dry run: %d change(s) found, nothing written", total)
    elif total == 0 and not force:
        logger.info("No changes; table of contents and index left untouched")
    else:
        write_outputs(blog, templates, settings)
        logger.info("Wrote table of contents and index (%d change(s))", total)
    return counts, changes
