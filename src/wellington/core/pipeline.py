"""Conversion pipeline: markdown -> transformed events -> article HTML"""

import logging
from pathlib import Path
from typing import Any, Optional

from wellington.core.events import events_from_markdown
from wellington.core.models import ConvertedPost
from wellington.core.render import render_html
from wellington.core.templates import Template, post_record
from wellington.core.transformer import SidenoteTransformer
from wellington.errors import FileReadError, FileWriteError

logger = logging.getLogger(__name__)

ARTICLE_OPEN = "<article>\n<section>\n"
ARTICLE_CLOSE = "</section>\n</article>\n"


def convert_markdown(markdown: str, link_prefix: str = "", preset: str = 'gfm-like') -> ConvertedPost:
    """Convert one markdown document into an article body and its title.

    Sidenote errors propagate unchanged; no partial body is ever returned.
    """
    transformer = SidenoteTransformer(events_from_markdown(markdown, preset), link_prefix)
    html = render_html(transformer)
    return ConvertedPost(body=f"{ARTICLE_OPEN}{html}{ARTICLE_CLOSE}", title=transformer.title)


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path) from e


def write_text(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        raise FileWriteError(path) from e


def convert_file(
    input_path: Path,
    output_path: Path,
    link_prefix: str = "",
    template: Optional[Template] = None,
    preset: str = 'gfm-like',
    **metadata: Any,
    ) -> ConvertedPost:
    """Convert a markdown file to HTML, optionally through a post template."""
    converted = convert_markdown(read_text(input_path), link_prefix, preset)
    html = converted.body
    if template is not None:
        html = template.render(post_record(converted, **metadata))
    write_text(output_path, html)
    logger.info("Converted %s -> %s (title: %r)", input_path, output_path, converted.title)
    return converted
