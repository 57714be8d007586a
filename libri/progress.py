"""Reading position and bookmarks, keyed by book identifier.

Chapter indices refer to positions in ``Document.chapters``.  The parser never
touches this store; the reader layers (web, CLI) do.
"""

from __future__ import annotations

import logging
from typing import List

from .models import Bookmark, ReadingProgress, get_session

__all__ = ["get_bookmarks", "load_progress", "save_progress", "toggle_bookmark"]

logger = logging.getLogger(__name__)


def load_progress(book_id: str) -> int:
    """Return the last stored chapter index for *book_id* (0 if none)."""
    with get_session() as session:
        row = session.get(ReadingProgress, book_id)
        return row.chapter_index if row else 0


def save_progress(book_id: str, chapter_index: int) -> None:
    if chapter_index < 0:
        raise ValueError(f"chapter index must be >= 0, got {chapter_index}")
    with get_session() as session:
        row = session.get(ReadingProgress, book_id)
        if row is None:
            session.add(ReadingProgress(book_id=book_id, chapter_index=chapter_index))
        else:
            row.chapter_index = chapter_index
        session.commit()
    logger.debug("Progress for %s saved at chapter %d", book_id, chapter_index)


def get_bookmarks(book_id: str) -> List[int]:
    with get_session() as session:
        rows = session.query(Bookmark).filter_by(book_id=book_id).order_by(Bookmark.chapter_index).all()
        return [row.chapter_index for row in rows]


def toggle_bookmark(book_id: str, chapter_index: int) -> List[int]:
    """Add or remove the bookmark on *chapter_index*; return all bookmarks."""
    with get_session() as session:
        row = session.get(Bookmark, (book_id, chapter_index))
        if row is None:
            session.add(Bookmark(book_id=book_id, chapter_index=chapter_index))
        else:
            session.delete(row)
        session.commit()
    return get_bookmarks(book_id)
