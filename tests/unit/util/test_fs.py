"""Unit tests for util/fs.py"""

from datetime import datetime, timezone

import pytest

from wellington.errors import DirectoryReadError
from wellington.util.fs import list_posts


def test_lists_marked_directories_sorted(blog_dir):
    (blog_dir / "notes.txt").write_text("not a post", encoding="utf-8")
    names = [p.name for p in list_posts(blog_dir)]
    assert names == ["irkutsk", "krasnoyarsk", "yekaterinburg"]


def test_last_updated_is_source_mtime(blog_dir):
    post = list_posts(blog_dir)[0]
    assert post.name == "irkutsk"
    assert post.last_updated == datetime(2020, 1, 1, tzinfo=timezone.utc)


def test_marker_must_be_a_file(blog_dir):
    (blog_dir / "ghosttown" / "index.md").mkdir()
    assert "ghosttown" not in [p.name for p in list_posts(blog_dir)]


def test_missing_root(tmp_path):
    with pytest.raises(DirectoryReadError):
        list_posts(tmp_path / "missing")
