"""Unit tests for core/transformer.py, driven by hand-built event streams"""

import pytest

from wellington.core.events import End, Html, SoftBreak, Start, Tag, TagKind, Text
from wellington.core.sidenotes import SIDENOTE_CLOSE, SIDENOTE_OPEN
from wellington.core.transformer import (
    CODE_BLOCK_CLASS, LINE_BREAK, SECTION_BREAK, SidenoteTransformer, prefix_url,
)
from wellington.errors import SidenoteNested, SidenoteNotMatched


P = Tag(TagKind.paragraph)
H1 = Tag(TagKind.heading, level=1)
H2 = Tag(TagKind.heading, level=2)
CODE = Tag(TagKind.code_span)
BLOCK = Tag(TagKind.code_block, language="rust")
OPEN, CLOSE = Html(SIDENOTE_OPEN), Html(SIDENOTE_CLOSE)


def _run(events, link_prefix=""):
    t = SidenoteTransformer(events, link_prefix)
    return list(t), t


def test_passes_through_plain_events():
    events = [Start(P), Text("hello"), SoftBreak(), Text("world"), End(P)]
    out, _ = _run(events)
    assert out == events


def test_splits_text_around_sidenote():
    out, _ = _run([Start(P), Text("some {note} here"), End(P)])
    assert out == [Start(P), Text("some "), OPEN, Text("note"), CLOSE, Text(" here"), End(P)]


def test_pull_one_event_at_a_time():
    """Each call to next() returns exactly one event; the remainder stays pending."""
    t = SidenoteTransformer([Text("some remaining { text }")])
    assert next(t) == Text("some remaining ")
    assert t.state.pending_text == "{ text }"
    assert next(t) == OPEN
    assert t.state.in_sidenote_block
    assert next(t) == Text(" text ")
    assert next(t) == CLOSE
    assert t.state.pending_text == ""
    with pytest.raises(StopIteration):
        next(t)


def test_sidenote_spans_text_events():
    out, _ = _run([Start(P), Text("a {b"), SoftBreak(), Text("c} d"), End(P)])
    assert out == [Start(P), Text("a "), OPEN, Text("b"), SoftBreak(), Text("c"), CLOSE, Text(" d"), End(P)]


def test_paragraph_boundary_inside_sidenote_becomes_line_break():
    events = [
        Start(P), Text("{ a sidenote"), End(P),
        Start(P), Text("spanning lines"), End(P),
        Start(P), Text("}."), End(P),
    ]
    out, _ = _run(events)
    assert out == [
        Start(P), OPEN, Text(" a sidenote"), Html(LINE_BREAK),
        Html(LINE_BREAK), Text("spanning lines"), Html(LINE_BREAK),
        Html(LINE_BREAK), CLOSE, Text("."), End(P),
    ]


def test_unclosed_sidenote_at_end_of_document():
    with pytest.raises(SidenoteNotMatched):
        _run([Start(P), Text("open { never closed"), End(P)])


def test_nested_sidenote_across_events():
    with pytest.raises(SidenoteNested) as exc:
        _run([Start(P), Text("{outer"), End(P), Start(P), Text("{inner}"), End(P)])
    assert "outer" in exc.value.outer
    assert "inner" in exc.value.inner


def test_stray_close():
    with pytest.raises(SidenoteNotMatched):
        _run([Start(P), Text("no open }"), End(P)])


# --- code exclusion ---

def test_code_span_text_not_scanned():
    events = [Start(P), Start(CODE), Text("code {and braces"), End(CODE), End(P)]
    out, _ = _run(events)
    assert out == events


def test_code_block_text_not_scanned_and_gets_class():
    out, _ = _run([Start(BLOCK), Text("fn x() {\n}\n"), End(BLOCK)])
    assert out[0] == Start(Tag(TagKind.code_block, language="rust", css_class=CODE_BLOCK_CLASS))
    assert out[1] == Text("fn x() {\n}\n")
    assert isinstance(out[2], End) and out[2].tag.kind == TagKind.code_block


@pytest.mark.parametrize("tag", [CODE, BLOCK])
def test_closing_code_clears_flag(tag):
    """Both inline and block code close symmetrically; sidenotes work again afterwards."""
    t = SidenoteTransformer([Start(tag), Text("{"), End(tag), Start(P), Text("after {note}"), End(P)])
    out = list(t)
    assert not t.state.in_code_block
    assert OPEN in out and CLOSE in out


@pytest.mark.parametrize("tag", [CODE, BLOCK])
def test_code_inside_open_sidenote_is_error(tag):
    with pytest.raises(SidenoteNotMatched):
        _run([Start(P), Text("{ note "), Start(tag), Text("x"), End(tag), Text("}"), End(P)])


def test_sidenote_after_closed_code_span_same_line():
    events = [Start(P), Start(CODE), Text("code"), End(CODE), Text(" then {note}."), End(P)]
    out, _ = _run(events)
    assert out == [
        Start(P), Start(CODE), Text("code"), End(CODE),
        Text(" then "), OPEN, Text("note"), CLOSE, Text("."), End(P),
    ]


# --- title capture ---

def test_first_h1_is_title_and_becomes_section_break():
    out, t = _run([Start(H1), Text("hello"), End(H1), Start(P), Text("body"), End(P)])
    assert t.title == "hello"
    assert out[:3] == [Start(H1), Text("hello"), Html(SECTION_BREAK)]


def test_only_first_title_is_kept():
    _, t = _run([Start(H1), Text("first"), End(H1), Start(H1), Text("second"), End(H1)])
    assert t.title == "first"


def test_no_h1_no_title():
    _, t = _run([Start(H2), Text("sub"), End(H2)])
    assert t.title is None


def test_empty_h1_is_no_title():
    _, t = _run([Start(H1), Text("   "), End(H1)])
    assert t.title is None


def test_empty_first_h1_yields_to_next_h1():
    _, t = _run([Start(H1), End(H1), Start(H1), Text("Second"), End(H1)])
    assert t.title == "Second"


def test_title_skips_sidenote_text():
    _, t = _run([Start(H1), Text("Title {aside}"), End(H1)])
    assert t.title == "Title"


def test_title_includes_inline_markup_text():
    em = Tag(TagKind.emphasis)
    _, t = _run([Start(H1), Text("Hello "), Start(em), Text("world"), End(em), End(H1)])
    assert t.title == "Hello world"


# --- url rewriting ---

@pytest.mark.parametrize("url,expected", [
    ("img.png", "/blog/post/img.png"),
    ("sub/page.html", "/blog/post/sub/page.html"),
    ("/root/img.png", "/root/img.png"),
    ("https://example.com/x.png", "https://example.com/x.png"),
    ("ftp://host/file", "ftp://host/file"),
    ("mailto:a@b.c", "mailto:a@b.c"),
    ("tel:+15550100", "tel:+15550100"),
    ("#notes", "#notes"),
    ("page.html#notes", "/blog/post/page.html#notes"),
])
def test_prefix_url(url, expected):
    assert prefix_url(url, "/blog/post/") == expected


def test_empty_prefix_is_noop():
    assert prefix_url("img.png", "") == "img.png"


def test_link_and_image_urls_rewritten():
    link = Tag(TagKind.link, url="other.html")
    image = Tag(TagKind.image, url="pic.png", title="t")
    out, _ = _run([Start(link), Text("a"), End(link), Start(image), Text("alt {x"), End(image)], "/b/p/")
    assert out[0] == Start(Tag(TagKind.link, url="/b/p/other.html"))
    assert out[3] == Start(Tag(TagKind.image, url="/b/p/pic.png", title="t"))
    # alt text is not scanned for sidenotes
    assert out[4] == Text("alt {x")
