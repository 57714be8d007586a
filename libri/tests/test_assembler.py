from pathlib import Path

from libri.archive import open_archive
from libri.assembler import assemble, chapter_path, decode_markup, iter_assemble
from libri.package import parse_package

from .epubs import XHTML, chapter_xhtml, package_xml, two_chapter_files


def _assemble(epub: Path, package_dir: str = "OEBPS"):
    with open_archive(epub) as archive:
        package = parse_package(archive.read(f"{package_dir}/content.opf" if package_dir else "content.opf"))
        return assemble(archive, package_dir, package)


def test_two_chapters_in_spine_order(two_chapter_epub: Path):
    chapters = _assemble(two_chapter_epub)

    assert [c.id for c in chapters] == ["ch1", "ch2"]
    assert [c.href for c in chapters] == ["Text/ch1.xhtml", "Text/ch2.xhtml"]
    assert [c.title for c in chapters] == ["Chapter One", "The Carpet-Bag"]
    assert chapters[0].content == "<h1>Loomings</h1>\n<p>Call me Ishmael.</p>"
    assert all(c.content for c in chapters)


def test_spine_id_missing_from_manifest_is_skipped(make_epub):
    files = two_chapter_files()
    files["OEBPS/content.opf"] = package_xml(
        [("ch1", "Text/ch1.xhtml", XHTML), ("ch2", "Text/ch2.xhtml", XHTML)],
        ["ch1", "ghost", "ch2"],
    )
    chapters = _assemble(make_epub(files))

    assert len(chapters) == 2
    assert [(c.id, c.href) for c in chapters] == [("ch1", "Text/ch1.xhtml"), ("ch2", "Text/ch2.xhtml")]


def test_missing_archive_entry_is_skipped(make_epub):
    files = two_chapter_files()
    files["OEBPS/content.opf"] = package_xml(
        [
            ("ch1", "Text/ch1.xhtml", XHTML),
            ("lost", "Text/lost.xhtml", XHTML),
            ("ch2", "Text/ch2.xhtml", XHTML),
        ],
        ["ch1", "lost", "ch2"],
    )
    chapters = _assemble(make_epub(files))
    assert [c.id for c in chapters] == ["ch1", "ch2"]


def test_fallback_title_uses_spine_position(make_epub):
    files = {
        "OEBPS/content.opf": package_xml(
            [("a", "a.xhtml", XHTML), ("b", "b.xhtml", XHTML)],
            ["ghost", "a", "b"],
        ),
        "OEBPS/a.xhtml": chapter_xhtml("<p>untitled</p>"),
        "OEBPS/b.xhtml": chapter_xhtml("<p>also untitled</p>", title=""),
    }
    chapters = _assemble(make_epub(files))
    assert [c.title for c in chapters] == ["Chapter 2", "Chapter 3"]


def test_package_at_archive_root(make_epub):
    files = {
        "content.opf": package_xml([("a", "a.xhtml", XHTML)], ["a"]),
        "a.xhtml": chapter_xhtml("<p>root level</p>", title="Root"),
    }
    chapters = _assemble(make_epub(files), package_dir="")
    assert [(c.href, c.title, c.content) for c in chapters] == [("a.xhtml", "Root", "<p>root level</p>")]


def test_relative_and_escaped_hrefs_resolve(make_epub):
    files = {
        "OEBPS/content.opf": package_xml(
            [("up", "../Text/up.xhtml", XHTML), ("sp", "Text/chapter%201.xhtml", XHTML)],
            ["up", "sp"],
        ),
        "Text/up.xhtml": chapter_xhtml("<p>one level up</p>"),
        "OEBPS/Text/chapter 1.xhtml": chapter_xhtml("<p>with a space</p>"),
    }
    chapters = _assemble(make_epub(files))
    # href stays as declared
    assert [c.href for c in chapters] == ["../Text/up.xhtml", "Text/chapter%201.xhtml"]
    assert [c.content for c in chapters] == ["<p>one level up</p>", "<p>with a space</p>"]


def test_iter_assemble_is_lazy(two_chapter_epub: Path):
    with open_archive(two_chapter_epub) as archive:
        package = parse_package(archive.read("OEBPS/content.opf"))
        chapters = iter_assemble(archive, "OEBPS", package)
        assert next(chapters).id == "ch1"


def test_chapter_path():
    assert chapter_path("OEBPS", "Text/ch1.xhtml") == "OEBPS/Text/ch1.xhtml"
    assert chapter_path("", "ch1.xhtml") == "ch1.xhtml"


def test_decode_markup():
    assert decode_markup("\ufeff<p>é</p>".encode("utf-8")) == "<p>é</p>"
    assert decode_markup("<p>café</p>".encode("latin-1")) == "<p>café</p>"
    assert decode_markup("<p>ж</p>".encode("cp1251"), encoding="cp1251") == "<p>ж</p>"
