"""Top-level entry points: EPUB path in, :class:`~libri.document.Document` out.

The archive is opened once per call and released before control returns,
whatever way the parse ends.  Only :class:`~libri.archive.ArchiveError`
escapes; a missing or unreadable package document produces an empty
document, which callers should present as "no content available".

The work is blocking file I/O; run it off any UI/event-loop thread.
"""
from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .archive import Archive, open_archive
from .assembler import iter_assemble
from .container import locate_package
from .document import Chapter, Document, PackageDocument
from .package import parse_package

__all__ = ["iter_chapters", "load_document", "package_directory"]

logger = logging.getLogger(__name__)


def package_directory(package_path: str) -> str:
    """Directory holding the package document, ``""`` at the archive root."""
    return posixpath.dirname(package_path)


def _read_package(archive: Archive) -> Tuple[str, Optional[PackageDocument]]:
    package_path = locate_package(archive)
    raw = archive.read(package_path)
    if raw is None:
        logger.warning("Package document %s not found in %s", package_path, archive.path)
        return package_path, None
    return package_path, parse_package(raw)


def load_document(
    path: Path | str,
    *,
    encoding: str = "utf-8",
    fallback_encoding: str = "latin-1",
) -> Document:
    """Parse the EPUB at *path*."""
    path = Path(path)
    base_reference = path.expanduser().resolve().as_uri()

    with open_archive(path) as archive:
        package_path, package = _read_package(archive)
        if package is None:
            return Document(title=None, author=None, chapters=(), base_reference=base_reference)
        chapters = tuple(
            iter_assemble(
                archive,
                package_directory(package_path),
                package,
                encoding=encoding,
                fallback_encoding=fallback_encoding,
            )
        )

    logger.info("Loaded %s: %d of %d spine entries", path.name, len(chapters), len(package.spine))
    return Document(
        title=package.title,
        author=package.author,
        chapters=chapters,
        base_reference=base_reference,
    )


def iter_chapters(
    path: Path | str,
    *,
    encoding: str = "utf-8",
    fallback_encoding: str = "latin-1",
) -> Iterator[Chapter]:
    """Yield the chapters of the EPUB at *path* lazily.

    Closing the generator before it is exhausted releases the archive.
    """
    with open_archive(path) as archive:
        package_path, package = _read_package(archive)
        if package is None:
            return
        yield from iter_assemble(
            archive,
            package_directory(package_path),
            package,
            encoding=encoding,
            fallback_encoding=fallback_encoding,
        )
