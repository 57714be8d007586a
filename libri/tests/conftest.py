"""Pytest configuration for libri tests."""
from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from .epubs import two_chapter_files, write_epub


@pytest.fixture()
def make_epub(tmp_path: Path):
    """Return a helper writing ``files`` into an .epub under tmp_path."""

    def _make(files, name: str = "book.epub") -> Path:
        return write_epub(tmp_path / name, files)

    return _make


@pytest.fixture()
def two_chapter_epub(make_epub) -> Path:
    return make_epub(two_chapter_files())


@pytest.fixture()
def released(monkeypatch):
    """Record every release of a zip handle opened for reading."""
    calls: list[str] = []
    original = zipfile.ZipFile.close

    def spy(self):
        if self.fp is not None and self.mode == "r":
            calls.append(str(self.filename))
        original(self)

    monkeypatch.setattr(zipfile.ZipFile, "close", spy)
    return calls


@pytest.fixture()
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'libri-test.db'}"
