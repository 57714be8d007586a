"""Flask JSON API serving parsed books chapter by chapter."""
from __future__ import annotations

import logging
from pathlib import Path

from flask import Flask, abort, jsonify

from .archive import ArchiveError
from .document import Chapter, Document
from .library import LibraryResolver
from .loader import load_document
from .models import DEFAULT_DB_URL, init_db
from .progress import get_bookmarks, load_progress, save_progress, toggle_bookmark

logger = logging.getLogger(__name__)

NO_CONTENT_MESSAGE = "No content available"


def _chapter_summary(index: int, chapter: Chapter) -> dict:
    return {"index": index, "id": chapter.id, "title": chapter.title, "href": chapter.href}


def create_app(library_dir: Path | str, db_url: str = DEFAULT_DB_URL) -> Flask:
    app = Flask(__name__)
    init_db(db_url)
    library = LibraryResolver(library_dir)

    def _load(book_id: str) -> Document:
        path = library.resolve(book_id)
        if path is None:
            abort(404)
        return load_document(path)

    @app.errorhandler(ArchiveError)
    def archive_failed(exc: ArchiveError):
        logger.error("%s", exc)
        cause = exc.__cause__ or exc
        return jsonify(error="failed to load", detail=str(cause), retryable=True), 500

    @app.route("/books")
    def books():
        return jsonify(books=library.book_ids())

    @app.route("/books/<book_id>")
    def book_detail(book_id: str):
        document = _load(book_id)
        payload = {
            "id": book_id,
            "title": document.title,
            "author": document.author,
            "base_reference": document.base_reference,
            "chapters": [_chapter_summary(i, ch) for i, ch in enumerate(document.chapters)],
            "current_index": document.clamp_index(load_progress(book_id)),
            "bookmarks": get_bookmarks(book_id),
        }
        if document.is_empty:
            payload["message"] = NO_CONTENT_MESSAGE
        return jsonify(payload)

    @app.route("/books/<book_id>/chapters/<int:index>")
    def chapter(book_id: str, index: int):
        document = _load(book_id)
        if index >= len(document.chapters):
            abort(404)
        save_progress(book_id, index)
        payload = _chapter_summary(index, document.chapters[index])
        payload["content"] = document.chapters[index].content
        payload["count"] = len(document.chapters)
        return jsonify(payload)

    @app.route("/books/<book_id>/bookmarks/<int:index>", methods=["POST"])
    def bookmark(book_id: str, index: int):
        if library.resolve(book_id) is None:
            abort(404)
        return jsonify(bookmarks=toggle_bookmark(book_id, index))

    return app
