"""Post, table-of-contents, and RSS templates: loading, validation, rendering"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError
from jinja2 import Template as JinjaTemplate
from jinja2.exceptions import TemplateError as JinjaError

from wellington.core.models import ConvertedPost
from wellington.core.rss import example_rss_record
from wellington.crud.models import IndexedBlogPost
from wellington.errors import (
    FileWriteError, TemplateInvalidSyntax, TemplateReadError, TemplateValidationFailed,
)

logger = logging.getLogger(__name__)


DEFAULT_POST_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{ title or "Untitled" }}</title>
<link rel="stylesheet" href="{{ index_url }}tufte.css">
</head>
<body>
{{ body }}
<p class="published">First published {{ first_published.strftime("%Y-%m-%d") }}</p>
<p><a href="{{ index_url }}">All posts</a></p>
</body>
</html>
"""

DEFAULT_INDEX_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Posts</title>
<link rel="stylesheet" href="{{ index_url }}tufte.css">
<link rel="alternate" type="application/rss+xml" href="{{ index_url }}rss.xml">
</head>
<body>
<article>
<h1>Posts</h1>
<ul>
{% for post in posts %}
<li><a href="{{ post.post_url }}">{{ post.title or post.post_url }}</a> <span class="date">{{ post.first_published.strftime("%Y-%m-%d") }}</span></li>
{% endfor %}
</ul>
</article>
</body>
</html>
"""

DEFAULT_RSS_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
<title>{{ meta.title }}</title>
<link>{{ meta.home }}</link>
<description>{{ meta.description }}</description>
{% for post in posts %}
<item>
<title>{{ post.title or "Untitled" }}</title>
<link>{{ post.link }}</link>
<guid>{{ post.link }}</guid>
<author>{{ post.author }}</author>
<pubDate>{{ post.pub_date }}</pubDate>
</item>
{% endfor %}
</channel>
</rss>
"""


@dataclass
class Template:
    """A compiled template and the path it was (or would have been) read from."""
    path: str
    compiled: JinjaTemplate

    def render(self, record: dict[str, Any]) -> str:
        try:
            return self.compiled.render(**record)
        except JinjaError as e:
            raise TemplateValidationFailed(self.path, str(e)) from e

    def validate(self, example: dict[str, Any]) -> None:
        """Render once against a representative record; fail fast on unknown fields."""
        self.render(example)


def make_template(source: str, path: str, autoescape: bool = True) -> Template:
    env = Environment(undefined=StrictUndefined, autoescape=autoescape, keep_trailing_newline=True)
    try:
        return Template(path=path, compiled=env.from_string(source))
    except TemplateSyntaxError as e:
        raise TemplateInvalidSyntax(path, str(e)) from e


def read_template(path: Path, fallback: str) -> str:
    """Return the template text at path, or fallback when the file does not exist."""
    try:
        return path.read_text(encoding='utf-8')
    except FileNotFoundError:
        logger.debug("No template at %s, using built-in default", path)
        return fallback
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateReadError(str(path)) from e


def post_record(converted: ConvertedPost, **metadata: Any) -> dict[str, Any]:
    """Template record for a post page: rendered fields plus caller-owned metadata."""
    return {"title": converted.title, "body": converted.body, **metadata}


def example_post_record() -> dict[str, Any]:
    now = datetime.now(timezone.utc)
    return post_record(
        ConvertedPost(body="<article>\n<section>\n<p>some article</p>\n</section>\n</article>\n",
                      title="Example"),
        post_url="/blog/example/", index_url="/blog/",
        first_published=now, last_updated=now,
    )


def toc_record(index_url: str, posts: list) -> dict[str, Any]:
    """Template record for the table of contents, in the order posts are given."""
    return {
        "index_url": index_url,
        "posts": [
            {
                "post_url": p.post_url,
                "title": p.title,
                "first_published": p.first_published,
                "last_updated": p.last_updated,
            }
            for p in posts
        ],
    }


def example_toc_record() -> dict[str, Any]:
    now = datetime.now(timezone.utc)
    post = IndexedBlogPost(post_url="/blog/example/", first_published=now, last_updated=now, title="Example")
    return toc_record("/blog/", [post])


@dataclass
class Templates:
    post: Template
    index: Template
    rss: Template

    @classmethod
    def load(cls, root: Path, post_path: str, index_path: str, rss_path: str) -> "Templates":
        """Read templates relative to root (built-in defaults where absent) and validate them."""
        templates = cls(
            post=load_template(root / post_path, DEFAULT_POST_TEMPLATE, autoescape=False),
            index=load_template(root / index_path, DEFAULT_INDEX_TEMPLATE),
            rss=load_template(root / rss_path, DEFAULT_RSS_TEMPLATE),
        )
        templates.post.validate(example_post_record())
        templates.index.validate(example_toc_record())
        templates.rss.validate(example_rss_record())
        return templates


def load_template(path: Path, fallback: str, autoescape: bool = True) -> Template:
    return make_template(read_template(path, fallback), str(path), autoescape)


def load_post_template(path: Path) -> Template:
    """Load and validate an explicitly named post template (used by `convert --template`)."""
    try:
        source = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateReadError(str(path)) from e
    template = make_template(source, str(path), autoescape=False)
    template.validate(example_post_record())
    return template


def write_default_templates(root: Path, post_path: str, index_path: str, rss_path: str) -> list[Path]:
    """Write built-in templates into root where no file exists yet. Returns written paths."""
    written = []
    for rel, source in (
        (post_path, DEFAULT_POST_TEMPLATE),
        (index_path, DEFAULT_INDEX_TEMPLATE),
        (rss_path, DEFAULT_RSS_TEMPLATE),
    ):
        dest = root / rel
        if not dest.exists():
            try:
                dest.write_text(source, encoding='utf-8')
            except OSError as e:
                raise FileWriteError(dest) from e
            written.append(dest)
    return written
