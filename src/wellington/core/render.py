"""Render a structural event stream to an HTML string"""

from typing import Iterable

from markdown_it.common.utils import escapeHtml

from wellington.core.events import (
    End, Event, HardBreak, Html, Rule, SoftBreak, Start, Tag, TagKind, Text,
)


_INLINE_TAGS: dict[TagKind, str] = {
    TagKind.emphasis:      'em',
    TagKind.strong:        'strong',
    TagKind.strikethrough: 's',
    TagKind.code_span:     'code',
}

_BLOCK_TAGS: dict[TagKind, str] = {
    TagKind.blockquote: 'blockquote',
    TagKind.table:      'table',
    TagKind.table_head: 'thead',
    TagKind.table_body: 'tbody',
    TagKind.table_row:  'tr',
}


def _attr(name: str, value) -> str:
    return f' {name}="{escapeHtml(str(value))}"' if value not in (None, '') else ''


def _cell(name: str, tag: Tag) -> str:
    style = f"text-align:{tag.align}" if tag.align else None
    return f"<{name}{_attr('style', style)}>"


def _open(tag: Tag) -> str:
    kind = tag.kind
    if kind in _INLINE_TAGS:
        return f"<{_INLINE_TAGS[kind]}>"
    if kind in _BLOCK_TAGS:
        return f"<{_BLOCK_TAGS[kind]}>\n"
    if kind == TagKind.paragraph:
        return "<p>"
    if kind == TagKind.heading:
        return f"<h{tag.level}>"
    if kind == TagKind.code_block:
        lang = f"language-{tag.language}" if tag.language else None
        return f"<pre{_attr('class', tag.css_class)}><code{_attr('class', lang)}>"
    if kind == TagKind.list:
        if tag.ordered:
            start = tag.start if tag.start not in (None, 1) else None
            return f"<ol{_attr('start', start)}>\n"
        return "<ul>\n"
    if kind == TagKind.item:
        return "<li>"
    if kind == TagKind.link:
        return f"<a{_attr('href', tag.url)}{_attr('title', tag.title)}>"
    if kind == TagKind.table_header_cell:
        return _cell('th', tag)
    if kind == TagKind.table_cell:
        return _cell('td', tag)
    raise ValueError(f"Unknown tag kind: {kind}")


def _close(tag: Tag) -> str:
    kind = tag.kind
    if kind in _INLINE_TAGS:
        return f"</{_INLINE_TAGS[kind]}>"
    if kind in _BLOCK_TAGS:
        return f"</{_BLOCK_TAGS[kind]}>\n"
    if kind == TagKind.paragraph:
        return "</p>\n"
    if kind == TagKind.heading:
        return f"</h{tag.level}>\n"
    if kind == TagKind.code_block:
        return "</code></pre>\n"
    if kind == TagKind.list:
        return "</ol>\n" if tag.ordered else "</ul>\n"
    if kind == TagKind.item:
        return "</li>\n"
    if kind == TagKind.link:
        return "</a>"
    if kind == TagKind.table_header_cell:
        return "</th>\n"
    if kind == TagKind.table_cell:
        return "</td>\n"
    raise ValueError(f"Unknown tag kind: {kind}")


def push_html(buf: list[str], events: Iterable[Event]) -> None:
    """Append the HTML for events to buf.

    Image alt text is collected as plain text into the alt attribute; markup
    events between an image's start and end are dropped.
    """
    image: Tag | None = None
    alt: list[str] = []
    for event in events:
        if image is not None:
            if isinstance(event, End) and event.tag.kind == TagKind.image:
                buf.append(
                    f'<img src="{escapeHtml(image.url or "")}" alt="{escapeHtml("".join(alt))}"'
                    f'{_attr("title", image.title)} />'
                )
                image, alt = None, []
            elif isinstance(event, Text):
                alt.append(event.text)
            elif isinstance(event, (SoftBreak, HardBreak)):
                alt.append(' ')
            continue

        if isinstance(event, Text):
            buf.append(escapeHtml(event.text))
        elif isinstance(event, Html):
            buf.append(event.markup)
        elif isinstance(event, Start):
            if event.tag.kind == TagKind.image:
                image = event.tag
            else:
                buf.append(_open(event.tag))
        elif isinstance(event, End):
            buf.append(_close(event.tag))
        elif isinstance(event, SoftBreak):
            buf.append("\n")
        elif isinstance(event, HardBreak):
            buf.append("<br />\n")
        elif isinstance(event, Rule):
            buf.append("<hr />\n")


def render_html(events: Iterable[Event]) -> str:
    """Render events to a single HTML string."""
    buf: list[str] = []
    push_html(buf, events)
    return ''.join(buf)
