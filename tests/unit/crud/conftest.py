"""Shared fixtures for crud unit tests"""

from datetime import datetime, timezone

import pytest

from wellington.crud.models import IndexedBlogPost


@pytest.fixture(name="post")
def post_fixture():
    """A single indexed post with distinct publish and update times."""
    return IndexedBlogPost(
        post_url="/blog/irkutsk/",
        first_published=datetime(2021, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        last_updated=datetime(2021, 6, 7, 8, 9, 10, tzinfo=timezone.utc),
        title="Irkutsk, by train",
    )
