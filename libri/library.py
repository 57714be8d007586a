"""
Locates downloaded EPUB files for a given book identifier.

Books live as ``<book_id>.epub`` anywhere below a library directory::

    library/
        84.epub
        gutenberg/1342.epub
        openlibrary/OL45804W.epub

The file stem is the book identifier used by the reading-state store.  When
two files share a stem the one found first in sorted path order wins.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

__all__ = ["LibraryResolver"]

logger = logging.getLogger(__name__)


class LibraryResolver:
    """Map book identifiers to ``.epub`` files below *library_root*.

    Parameters
    ----------
    library_root: str | Path
        Directory holding the downloaded books.
    """

    SUFFIX = ".epub"

    def __init__(self, library_root: Path | str):
        self.library_root = Path(library_root).expanduser().resolve()
        if not self.library_root.exists():
            raise FileNotFoundError(self.library_root)
        self._books: Dict[str, Path] = {}
        self.rescan()

    def rescan(self) -> None:
        """Rebuild the identifier index from the directory contents."""
        books: Dict[str, Path] = {}
        for path in sorted(self.library_root.rglob(f"*{self.SUFFIX}")):
            if not path.is_file():
                continue
            if path.stem in books:
                logger.warning("Duplicate book id %s: ignoring %s", path.stem, path)
                continue
            books[path.stem] = path
        self._books = books

    def book_ids(self) -> List[str]:
        return sorted(self._books)

    def resolve(self, book_id: str) -> Optional[Path]:
        """Return the path of *book_id* or ``None`` if it is not in the library."""
        path = self._books.get(book_id)
        if path is None or not path.exists():
            # picked up files added since the last scan
            self.rescan()
            path = self._books.get(book_id)
        return path
