"""Root test configuration: environment isolation and a sample blog directory"""

import os
from datetime import datetime, timezone

import pytest

from wellington.config import Settings


POSTS = ["irkutsk", "krasnoyarsk", "yekaterinburg"]

# every sample index.md gets this mtime so tests control what counts as "changed"
PAST = datetime(2020, 1, 1, tzinfo=timezone.utc)


def set_mtime(path, when: datetime) -> None:
    ts = when.timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch):
    """Run from a clean tmp directory with no WELLINGTON_* overrides in effect."""
    for name in Settings.model_fields:
        monkeypatch.delenv(f"WELLINGTON_{name.upper()}", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(name="blog_dir")
def blog_dir_fixture(tmp_path):
    """A blog root with three posts and one directory lacking index.md."""
    root = tmp_path / "blog"
    root.mkdir()
    for name in POSTS:
        post = root / name
        post.mkdir()
        source = post / "index.md"
        source.write_text(f"{name.capitalize()}\n{'=' * len(name)}\n\nA trip to {name}{{by train}}.\n")
        set_mtime(source, PAST)
    (root / "ghosttown").mkdir()
    return root


@pytest.fixture(name="settings")
def settings_fixture(blog_dir):
    return Settings(blog_root=str(blog_dir))
