import zipfile
from pathlib import Path

import pytest

from libri.archive import ArchiveOpenError, ArchiveReadError
from libri.loader import iter_chapters, load_document, package_directory

from .epubs import XHTML, chapter_xhtml, package_xml, patch_entry_header, two_chapter_files


def test_load_two_chapter_book(two_chapter_epub: Path, released):
    document = load_document(two_chapter_epub)

    assert document.title == "Moby-Dick"
    assert document.author == "Herman Melville"
    assert [c.title for c in document.chapters] == ["Chapter One", "The Carpet-Bag"]
    assert document.base_reference == two_chapter_epub.resolve().as_uri()
    assert not document.is_empty
    assert released == [str(two_chapter_epub)]


def test_missing_container_uses_default_path(make_epub, released):
    files = two_chapter_files()
    del files["META-INF/container.xml"]
    epub = make_epub(files)

    document = load_document(epub)
    assert len(document.chapters) == 2
    assert released == [str(epub)]


def test_container_pointing_elsewhere(make_epub):
    files = {
        "META-INF/container.xml": two_chapter_files()["META-INF/container.xml"].replace(
            "OEBPS/content.opf", "book/package.opf"
        ),
        "book/package.opf": package_xml([("only", "only.xhtml", XHTML)], ["only"], title="Elsewhere"),
        "book/only.xhtml": chapter_xhtml("<p>found</p>"),
    }
    document = load_document(make_epub(files))
    assert document.title == "Elsewhere"
    assert [c.content for c in document.chapters] == ["<p>found</p>"]


def test_missing_package_gives_empty_document(make_epub, released):
    files = two_chapter_files()
    del files["OEBPS/content.opf"]
    epub = make_epub(files)

    document = load_document(epub)
    assert document.title is None
    assert document.author is None
    assert document.chapters == ()
    assert document.is_empty
    assert released == [str(epub)]


def test_malformed_package_gives_empty_document(make_epub):
    files = two_chapter_files()
    files["OEBPS/content.opf"] = '<package><manifest><item id="ch1" href="Text/ch1.xhtml"'
    document = load_document(make_epub(files))
    assert document.chapters == ()
    assert document.title is None


def test_archive_open_error(tmp_path: Path):
    bogus = tmp_path / "bogus.epub"
    bogus.write_bytes(b"PK but not really")
    with pytest.raises(ArchiveOpenError):
        load_document(bogus)


def test_read_failure_is_fatal_and_releases_archive(two_chapter_epub: Path, released, monkeypatch):
    def broken_read(self, name, pwd=None):
        raise OSError("device not ready")

    monkeypatch.setattr(zipfile.ZipFile, "read", broken_read)
    with pytest.raises(ArchiveReadError) as info:
        load_document(two_chapter_epub)
    assert isinstance(info.value.__cause__, OSError)
    assert released == [str(two_chapter_epub)]


def test_iter_chapters_releases_when_abandoned(two_chapter_epub: Path, released):
    chapters = iter_chapters(two_chapter_epub)
    first = next(chapters)
    assert first.id == "ch1"
    assert released == []

    chapters.close()
    assert released == [str(two_chapter_epub)]


def test_iter_chapters_missing_package(make_epub):
    files = two_chapter_files()
    del files["OEBPS/content.opf"]
    assert list(iter_chapters(make_epub(files))) == []


def test_clamp_index(two_chapter_epub: Path):
    document = load_document(two_chapter_epub)
    assert document.clamp_index(-3) == 0
    assert document.clamp_index(1) == 1
    assert document.clamp_index(99) == 1


def test_package_directory():
    assert package_directory("OEBPS/content.opf") == "OEBPS"
    assert package_directory("a/b/package.opf") == "a/b"
    assert package_directory("content.opf") == ""


def test_unsupported_compression_is_a_read_error(two_chapter_epub: Path, released):
    patch_entry_header(two_chapter_epub, "OEBPS/Text/ch1.xhtml", method=9)
    released.clear()

    with pytest.raises(ArchiveReadError) as info:
        load_document(two_chapter_epub)
    assert isinstance(info.value.__cause__, NotImplementedError)
    assert released == [str(two_chapter_epub)]
