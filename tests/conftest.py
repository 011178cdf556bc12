"""Shared fixtures: a throwaway client bundle and app factory."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from filedrop.app import App
from filedrop.config import FileDropConfig


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    """Create a small client bundle for testing."""
    public = tmp_path / "public"
    public.mkdir()

    (public / "landing-page.html").write_text("<h1>Landing</h1>")
    (public / "sharing.html").write_text("<h1>Sharing</h1>")
    (public / "manifest.json").write_text('{"name": "filedrop"}')
    (public / "data.bin").write_bytes(b"\x00\x01\x02\x03")

    styles = public / "styles"
    styles.mkdir()
    (styles / "main.css").write_text("body { color: red; }")

    scripts = public / "scripts"
    scripts.mkdir()
    (scripts / "app.js").write_text("console.log('hello');")

    docs = public / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<h1>Docs</h1>")

    return public


@pytest.fixture
def make_app(public_dir: Path) -> Callable[..., App]:
    """Build an App over the test bundle; keyword arguments go to the config."""

    def factory(**overrides: Any) -> App:
        return App(FileDropConfig(public_dir=public_dir, **overrides))

    return factory
