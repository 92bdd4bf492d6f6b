"""Shared fixtures for core unit tests"""

import pytest

from wellington.core.events import make_parser


SAMPLE_MD = """\
hello
=====

Here is some text with {sidenotes}.

* alpha
* beta

And also some `inline_code` as well as

```
code_with{
    curly_braces();
}
```
"""


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="parser")
def parser_fixture():
    return make_parser("gfm-like")


@pytest.fixture(name="sample_tokens")
def sample_tokens_fixture(parser, sample_md):
    return parser.parse(sample_md)
