"""Sidenote syntax: `{ ... }` spans compiled to marginal-note markup"""

import re
from typing import Optional

from wellington.core.events import Event, Html, Text
from wellington.errors import SidenoteNested, SidenoteNotMatched


SIDENOTE_OPEN = '<span class="sidenote">'
SIDENOTE_CLOSE = '</span>'
OPEN, CLOSE = '{', '}'

DELIMITER_RE = re.compile(r'[{}]')
CONTEXT_WIDTH = 20


def excerpt(text: str, position: int, width: int = CONTEXT_WIDTH) -> str:
    """Return up to `width` characters either side of text[position].

    Indices are code points, so multi-byte characters are never split.
    Truncated ends are marked with '...'; newlines are flattened to spaces.
    """
    position = min(max(position, 0), len(text))
    start = max(position - width, 0)
    end = min(position + width + 1, len(text))
    snippet = text[start:end].replace('\r', ' ').replace('\n', ' ')
    if start > 0:
        snippet = '...' + snippet
    if end < len(text):
        snippet = snippet + '...'
    return snippet


def find_delimiter(text: str, start: int = 0) -> int:
    """Index of the next sidenote delimiter at or after start, or -1."""
    m = DELIMITER_RE.search(text, start)
    return m.start() if m else -1


def delimiter_markup(delimiter: str, open_context: Optional[str], context: str) -> Html:
    """Markup for one delimiter; open_context is the excerpt where the open sidenote began, or None.

    Raises SidenoteNested for `{` inside an open sidenote and
    SidenoteNotMatched for `}` with no sidenote open.
    """
    if delimiter == OPEN:
        if open_context is not None:
            raise SidenoteNested(open_context, context)
        return Html(SIDENOTE_OPEN)
    if open_context is None:
        raise SidenoteNotMatched(context)
    return Html(SIDENOTE_CLOSE)


def compile_sidenotes(text: str) -> list[Event]:
    """Split one text fragment into plain-text and sidenote-markup events.

    Whole-fragment form of the delimiter step the streaming transformer
    applies across events. A `{` left open at the end raises
    SidenoteNotMatched.
    """
    events: list[Event] = []
    open_context: Optional[str] = None
    pos = 0
    while (i := find_delimiter(text, pos)) != -1:
        if i > pos:
            events.append(Text(text[pos:i]))
        context = excerpt(text, i)
        events.append(delimiter_markup(text[i], open_context, context))
        open_context = context if text[i] == OPEN else None
        pos = i + 1
    if open_context is not None:
        raise SidenoteNotMatched(open_context)
    if pos < len(text):
        events.append(Text(text[pos:]))
    return events
