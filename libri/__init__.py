"""libri - EPUB reader core.

This package provides:
    • load_document / iter_chapters – parse an .epub into title, author and
      chapters in reading order (libri.loader).
    • Low-level pieces: archive access, container lookup, package document
      parsing, chapter assembly and markup extraction.
    • Reading progress and bookmarks persisted with SQLAlchemy (libri.progress).
    • CLI utilities under libri.cli (Click) and a Flask JSON API (libri.web).

The parser does no network I/O and keeps no state between calls.
"""

__all__ = [
    "ArchiveError",
    "ArchiveOpenError",
    "ArchiveReadError",
    "Chapter",
    "Document",
    "iter_chapters",
    "load_document",
]

from .archive import ArchiveError, ArchiveOpenError, ArchiveReadError
from .document import Chapter, Document
from .loader import iter_chapters, load_document
