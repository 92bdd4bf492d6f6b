"""CLI command implementations"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Optional

import typer

from wellington.config import Settings, load_config
from wellington.core.pipeline import convert_file
from wellington.core.sync import num_updated, reconcile, sync_blog
from wellington.core.templates import Templates, load_post_template, write_default_templates
from wellington.crud.index import load_blog, save_blog
from wellington.crud.meta import make_meta, save_meta
from wellington.crud.models import Blog
from wellington.errors import WellingtonError


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _load_templates(settings: Settings) -> Templates:
    return Templates.load(settings.root, settings.post_template, settings.index_template, settings.rss_template)


def _echo_sync(counts: dict, changes: list, dry_run: bool = False) -> None:
    """Print per-post sync status and a summary line."""
    for status, post_url in changes:
        typer.echo(f"  {status}: {post_url}")
    prefix = "Dry run" if dry_run else "Sync complete"
    typer.echo(
        f"{prefix} - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['removed']} removed, "
        f"{counts['unchanged']} unchanged"
    )


def convert_cmd(
    input_file: Annotated[Path, typer.Argument(help="Input markdown file")],
    output_file: Annotated[Path, typer.Argument(help="Output html file")],
    link_prefix: Annotated[str, typer.Option("--link-prefix", help="Prefix for relative link and image urls")] = "",
    template: Annotated[Optional[Path], typer.Option("--template", help="Post template to render through")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Convert a single markdown file to html."""
    settings = _settings(overrides={"parser_config": parser})
    try:
        post_template = load_post_template(template) if template else None
        now = datetime.now(timezone.utc)
        converted = convert_file(
            input_file, output_file,
            link_prefix=link_prefix,
            template=post_template,
            preset=settings.parser_config,
            post_url=link_prefix, index_url="/",
            first_published=now, last_updated=now,
        )
    except WellingtonError as e:
        _fail(str(e))
    typer.echo(f"  {input_file} -> {output_file}" + (f" ({converted.title})" if converted.title else ""))


def init_cmd(
    home: Annotated[str, typer.Option("--home", help="Site home url, without path (e.g. https://example.com)")],
    title: Annotated[str, typer.Option("--title", help="Site title for the RSS feed")] = "My blog",
    description: Annotated[str, typer.Option("--description", help="Site description for the RSS feed")] = "",
    author: Annotated[str, typer.Option("--author", help="Author name for the RSS feed")] = "",
    root: Annotated[Optional[str], typer.Option("--root", help="Blog root directory")] = None,
    reset: Annotated[bool, typer.Option("--reset", help="Discard the existing post index")] = False,
    templates: Annotated[bool, typer.Option("--templates", help="Write default templates for customization")] = False,
    ):
    """Initialize a blog directory: site metadata and an empty post index."""
    settings = _settings(overrides={"blog_root": root})
    try:
        meta = make_meta(title, home, description, author)
        blog = Blog.new(settings.root)
        save_meta(blog.path / settings.meta_file, meta)
        index_path = blog.path / settings.index_file
        if reset or not index_path.exists():
            if reset and index_path.exists():
                typer.echo("Existing index cleared.")
            save_blog(blog, settings.index_file)
        if templates:
            for path in write_default_templates(
                blog.path, settings.post_template, settings.index_template, settings.rss_template,
            ):
                typer.echo(f"  wrote {path}")
    except WellingtonError as e:
        _fail(str(e))
    typer.echo(f"Blog initialized at: {blog.path} ({blog.index_url})")


def sync_cmd(
    force: Annotated[bool, typer.Option("--force", "-f", help="Reconvert every post and rewrite the index")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report changes without converting or writing")] = False,
    root: Annotated[Optional[str], typer.Option("--root", help="Blog root directory")] = None,
    ):
    """Convert new and changed posts, then rewrite the table of contents and index."""
    settings = _settings(overrides={"blog_root": root})
    try:
        blog = load_blog(settings.root, settings.index_file)
        templates = _load_templates(settings)
        counts, changes = sync_blog(blog, templates, settings, force=force, dry_run=dry_run)
    except WellingtonError as e:
        _fail(str(e))
    _echo_sync(counts, changes, dry_run)
    if not dry_run and num_updated(counts) == 0 and not force:
        typer.echo("Nothing to do.")


def list_cmd(
    root: Annotated[Optional[str], typer.Option("--root", help="Blog root directory")] = None,
    ):
    """List post directories and whether the next sync would convert them."""
    settings = _settings(overrides={"blog_root": root})
    try:
        blog = load_blog(settings.root, settings.index_file, required=False)
        _, changes = reconcile(blog, None, settings, dry_run=True)
    except WellingtonError as e:
        _fail(str(e))
    status_of = dict((url, status) for status, url in changes)
    if not blog.posts and not changes:
        typer.echo("No posts found.")
        raise typer.Exit(1)
    for post in blog.posts:
        typer.echo(f"  {status_of.get(post.post_url, 'unchanged')}: {post.post_url}" + (f" - {post.title}" if post.title else ""))
    for status, url in changes:
        if status == "removed":
            typer.echo(f"  removed: {url}")
