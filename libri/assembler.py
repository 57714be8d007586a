"""Assembly of chapters in reading order.

Given an open :class:`~libri.archive.Archive` and a parsed package document,
every spine entry is resolved through the manifest to an archive entry whose
markup is reduced to a display title and a body fragment.  Spine entries that
do not resolve (unknown id, missing archive entry) are skipped without
leaving a placeholder.
"""
from __future__ import annotations

import logging
import posixpath
from typing import Iterator, List, Optional
from urllib.parse import unquote

from .archive import Archive
from .document import Chapter, ManifestEntry, PackageDocument
from .extract import extract_body, extract_title

__all__ = ["assemble", "chapter_path", "decode_markup", "iter_assemble"]

logger = logging.getLogger(__name__)


def chapter_path(package_dir: str, href: str) -> str:
    """Archive path of a manifest *href* relative to the package directory."""
    return f"{package_dir}/{href}" if package_dir else href


def _normalized_path(path: str) -> str:
    path = unquote(path.split("#", 1)[0])
    return posixpath.normpath(path).lstrip("/")


def decode_markup(data: bytes, encoding: str = "utf-8", fallback_encoding: str = "latin-1") -> str:
    if encoding.lower().replace("_", "-") in ("utf-8", "utf8"):
        encoding = "utf-8-sig"
    try:
        return data.decode(encoding)
    except UnicodeDecodeError:
        return data.decode(fallback_encoding, errors="replace")


def _read_entry(archive: Archive, path: str) -> Optional[bytes]:
    data = archive.read(path)
    if data is not None:
        return data
    normalized = _normalized_path(path)
    if normalized != path:
        return archive.read(normalized)
    return None


def _chapter_title(markup: str, entry: ManifestEntry, index: int) -> str:
    return extract_title(markup) or entry.title or f"Chapter {index + 1}"


# ---------------------------------------------------------------------------

def iter_assemble(
    archive: Archive,
    package_dir: str,
    package: PackageDocument,
    *,
    encoding: str = "utf-8",
    fallback_encoding: str = "latin-1",
) -> Iterator[Chapter]:
    """Yield chapters in spine order, one archive read at a time."""
    for index, idref in enumerate(package.spine):
        entry = package.manifest.get(idref)
        if entry is None:
            logger.debug("Spine entry %d (%r) not in manifest, skipped", index, idref)
            continue

        path = chapter_path(package_dir, entry.href)
        data = _read_entry(archive, path)
        if data is None:
            logger.debug("Spine entry %d (%r): %s missing from archive, skipped", index, idref, path)
            continue

        markup = decode_markup(data, encoding, fallback_encoding)
        yield Chapter(
            id=idref,
            title=_chapter_title(markup, entry, index),
            href=entry.href,
            content=extract_body(markup),
        )


def assemble(
    archive: Archive,
    package_dir: str,
    package: PackageDocument,
    *,
    encoding: str = "utf-8",
    fallback_encoding: str = "latin-1",
) -> List[Chapter]:
    """Return all resolvable chapters of *package* in spine order."""
    return list(
        iter_assemble(
            archive,
            package_dir,
            package,
            encoding=encoding,
            fallback_encoding=fallback_encoding,
        )
    )
