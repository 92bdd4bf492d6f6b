"""Markdown structural events and the markdown-it token adapter"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Iterator, Optional, Union

from markdown_it import MarkdownIt


class TagKind(str, Enum):
    """Container elements that open and close around other events"""
    paragraph = "paragraph"
    heading = "heading"
    blockquote = "blockquote"
    code_block = "code_block"
    code_span = "code_span"
    list = "list"
    item = "item"
    emphasis = "emphasis"
    strong = "strong"
    strikethrough = "strikethrough"
    link = "link"
    image = "image"
    table = "table"
    table_head = "table_head"
    table_body = "table_body"
    table_row = "table_row"
    table_header_cell = "table_header_cell"
    table_cell = "table_cell"


@dataclass(frozen=True)
class Tag:
    kind: TagKind
    level: Optional[int] = None         # heading level (1-6)
    language: Optional[str] = None      # code block info string language
    css_class: Optional[str] = None     # extra class on the code block container
    url: Optional[str] = None           # link href / image src
    title: Optional[str] = None         # link / image title
    ordered: bool = False               # list kind
    start: Optional[int] = None         # ordered list start number
    align: Optional[str] = None         # table cell text-align

    def with_url(self, url: str) -> "Tag":
        return replace(self, url=url)


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Start:
    tag: Tag


@dataclass(frozen=True)
class End:
    tag: Tag


@dataclass(frozen=True)
class Html:
    """Raw markup, emitted verbatim."""
    markup: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class Rule:
    pass


Event = Union[Text, Start, End, Html, SoftBreak, HardBreak, Rule]


_SIMPLE_TAGS: dict[str, TagKind] = {
    'paragraph':  TagKind.paragraph,
    'blockquote': TagKind.blockquote,
    'list_item':  TagKind.item,
    'em':         TagKind.emphasis,
    'strong':     TagKind.strong,
    's':          TagKind.strikethrough,
    'table':      TagKind.table,
    'thead':      TagKind.table_head,
    'tbody':      TagKind.table_body,
    'tr':         TagKind.table_row,
}

_ALIGN_STYLE = "text-align:"


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _split_type(token_type: str) -> tuple[str, int]:
    """'strong_open' -> ('strong', 1); 'strong_close' -> ('strong', -1)."""
    if token_type.endswith('_open'):
        return token_type[:-5], 1
    if token_type.endswith('_close'):
        return token_type[:-6], -1
    return token_type, 0


def _cell_align(token) -> Optional[str]:
    style = token.attrGet('style')
    if isinstance(style, str) and style.startswith(_ALIGN_STYLE):
        return style[len(_ALIGN_STYLE):]
    return None


def _opening_tag(name: str, token) -> Optional[Tag]:
    """Map an *_open token to a Tag; None for tokens without an event counterpart."""
    if name in _SIMPLE_TAGS:
        return Tag(_SIMPLE_TAGS[name])
    if name == 'heading':
        return Tag(TagKind.heading, level=int(token.tag[1:]))
    if name == 'bullet_list':
        return Tag(TagKind.list)
    if name == 'ordered_list':
        start = token.attrGet('start')
        return Tag(TagKind.list, ordered=True, start=int(start) if start is not None else None)
    if name == 'link':
        return Tag(TagKind.link, url=str(token.attrGet('href') or ''), title=token.attrGet('title'))
    if name == 'th':
        return Tag(TagKind.table_header_cell, align=_cell_align(token))
    if name == 'td':
        return Tag(TagKind.table_cell, align=_cell_align(token))
    return None


def _code_block(content: str, info: str = '') -> Iterator[Event]:
    language = info.strip().split()[0] if info.strip() else None
    tag = Tag(TagKind.code_block, language=language)
    yield Start(tag)
    if content:
        yield Text(content)
    yield End(tag)


def events_from_tokens(tokens: Iterable) -> Iterator[Event]:
    """Flatten a markdown-it token stream (with inline children) into structural events."""
    # open tags are kept so that a close token yields the same Tag its opener did
    open_tags: list[Optional[Tag]] = []
    for tok in tokens:
        if tok.type == 'inline':
            yield from events_from_tokens(tok.children or [])
            continue
        if tok.hidden:
            continue
        if tok.type == 'text':
            if tok.content:
                yield Text(tok.content)
        elif tok.type == 'softbreak':
            yield SoftBreak()
        elif tok.type == 'hardbreak':
            yield HardBreak()
        elif tok.type == 'hr':
            yield Rule()
        elif tok.type in ('html_block', 'html_inline'):
            yield Html(tok.content)
        elif tok.type == 'fence':
            yield from _code_block(tok.content, tok.info)
        elif tok.type == 'code_block':
            yield from _code_block(tok.content)
        elif tok.type == 'code_inline':
            tag = Tag(TagKind.code_span)
            yield Start(tag)
            yield Text(tok.content)
            yield End(tag)
        elif tok.type == 'image':
            tag = Tag(TagKind.image, url=str(tok.attrGet('src') or ''), title=tok.attrGet('title'))
            yield Start(tag)
            yield from events_from_tokens(tok.children or [])
            yield End(tag)
        else:
            name, nesting = _split_type(tok.type)
            if nesting == 1:
                tag = _opening_tag(name, tok)
                open_tags.append(tag)
                if tag is not None:
                    yield Start(tag)
            elif nesting == -1 and open_tags:
                tag = open_tags.pop()
                if tag is not None:
                    yield End(tag)


def events_from_markdown(markdown: str, preset: str = 'gfm-like') -> Iterator[Event]:
    """Parse markdown text and yield its structural events in document order."""
    return events_from_tokens(make_parser(preset).parse(markdown))
