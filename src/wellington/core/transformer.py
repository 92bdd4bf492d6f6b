"""Streaming event transformer: sidenotes, code exclusion, title capture, link rewriting.

The transformer is pulled one output event at a time. A single input event
may expand into several output events, so the remainder of a split text
fragment is kept in `pending_text` and ready events in `pending_output`;
both are drained before the next input event is read. This lets a sidenote
open in one text event and close several events (or paragraphs) later.
"""

import re
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from wellington.core.events import End, Event, Html, Start, Tag, TagKind, Text
from wellington.core.sidenotes import CLOSE, OPEN, delimiter_markup, excerpt, find_delimiter
from wellington.errors import SidenoteNotMatched


CODE_BLOCK_CLASS = "code"
LINE_BREAK = "<br />"
SECTION_BREAK = "</h1>\n</section>\n<section>\n"

_CODE_KINDS = (TagKind.code_span, TagKind.code_block)
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


@dataclass
class TransformerState:
    in_code_block: bool = False
    in_sidenote_block: bool = False
    in_title_capture: bool = False
    in_image: bool = False
    pending_text: str = ""
    pending_output: deque = field(default_factory=deque)
    link_prefix: str = ""
    captured_title: Optional[str] = None
    fragment: str = ""                  # text event pending_text was cut from
    open_context: str = ""              # excerpt where the open sidenote began
    title_parts: list[str] = field(default_factory=list)


def is_absolute_url(url: str) -> bool:
    """True when url has a scheme (https:, mailto:) or starts with '/' or '#'."""
    return bool(_SCHEME_RE.match(url)) or url.startswith(('/', '#'))


def prefix_url(url: str, prefix: str) -> str:
    """Prepend prefix to a relative url; absolute urls are unchanged."""
    if not prefix or is_absolute_url(url):
        return url
    return prefix + url


class SidenoteTransformer:
    """Iterator of output events over an iterable of input events."""

    def __init__(self, events: Iterable[Event], link_prefix: str = ""):
        self._events: Iterator[Event] = iter(events)
        self.state = TransformerState(link_prefix=link_prefix)

    @property
    def title(self) -> Optional[str]:
        return self.state.captured_title

    def __iter__(self) -> "SidenoteTransformer":
        return self

    def __next__(self) -> Event:
        state = self.state
        while True:
            if state.pending_output:
                return state.pending_output.popleft()
            if state.pending_text:
                self._resume_text()
                continue
            try:
                event = next(self._events)
            except StopIteration:
                self._finish()
                raise
            self._transform(event)

    # --- output ---

    def _emit(self, event: Event) -> None:
        state = self.state
        if state.in_title_capture and not state.in_sidenote_block and isinstance(event, Text):
            state.title_parts.append(event.text)
        state.pending_output.append(event)

    # --- text scanning ---

    def _scan_text(self, text: str) -> None:
        """Emit text up to the next delimiter; stash the delimiter and the rest."""
        i = find_delimiter(text)
        if i == -1:
            self.state.pending_text = ""
            if text:
                self._emit(Text(text))
            return
        if i > 0:
            self._emit(Text(text[:i]))
        self.state.pending_text = text[i:]

    def _resume_text(self) -> None:
        state = self.state
        text = state.pending_text
        if text[0] not in (OPEN, CLOSE):
            self._scan_text(text)
            return
        position = len(state.fragment) - len(text)
        context = excerpt(state.fragment, position)
        state.pending_text = text[1:]
        open_context = state.open_context if state.in_sidenote_block else None
        markup = delimiter_markup(text[0], open_context, context)
        state.in_sidenote_block = text[0] == OPEN
        state.open_context = context if text[0] == OPEN else ""
        self._emit(markup)

    # --- event dispatch ---

    def _transform(self, event: Event) -> None:
        state = self.state
        if isinstance(event, Text):
            if state.in_code_block or state.in_image:
                self._emit(event)
            else:
                state.fragment = event.text
                self._scan_text(event.text)
        elif isinstance(event, Start):
            self._start(event.tag)
        elif isinstance(event, End):
            self._end(event.tag)
        else:
            self._emit(event)

    def _start(self, tag: Tag) -> None:
        state = self.state
        kind = tag.kind
        if kind in _CODE_KINDS:
            if state.in_sidenote_block:
                raise SidenoteNotMatched(state.open_context)
            state.in_code_block = True
            if kind == TagKind.code_block:
                tag = Tag(TagKind.code_block, language=tag.language, css_class=CODE_BLOCK_CLASS)
            self._emit(Start(tag))
        elif kind == TagKind.paragraph and state.in_sidenote_block:
            self._emit(Html(LINE_BREAK))
        elif kind == TagKind.heading and tag.level == 1:
            if state.captured_title is None:
                state.in_title_capture = True
                state.title_parts = []
            self._emit(Start(tag))
        elif kind in (TagKind.image, TagKind.link):
            if kind == TagKind.image:
                state.in_image = True
            self._emit(Start(tag.with_url(prefix_url(tag.url or "", state.link_prefix))))
        else:
            self._emit(Start(tag))

    def _end(self, tag: Tag) -> None:
        state = self.state
        kind = tag.kind
        if kind in _CODE_KINDS:
            state.in_code_block = False
            if kind == TagKind.code_block:
                tag = Tag(TagKind.code_block, language=tag.language, css_class=CODE_BLOCK_CLASS)
            self._emit(End(tag))
        elif kind == TagKind.paragraph and state.in_sidenote_block:
            self._emit(Html(LINE_BREAK))
        elif kind == TagKind.heading and tag.level == 1:
            if state.in_title_capture:
                state.in_title_capture = False
                title = "".join(state.title_parts).strip()
                state.title_parts = []
                if title:
                    state.captured_title = title
            self._emit(Html(SECTION_BREAK))
        elif kind == TagKind.image:
            state.in_image = False
            self._emit(End(tag))
        else:
            self._emit(End(tag))

    def _finish(self) -> None:
        if self.state.in_sidenote_block:
            raise SidenoteNotMatched(self.state.open_context)
