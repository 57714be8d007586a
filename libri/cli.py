"""Command-line interface for libri utilities."""
from __future__ import annotations

import logging
from pathlib import Path

import click

from .archive import ArchiveError
from .loader import load_document
from .models import DEFAULT_DB_URL, init_db
from .progress import get_bookmarks, load_progress, save_progress, toggle_bookmark

db_url_option = click.option(
    "--db-url",
    default=DEFAULT_DB_URL,
    envvar="LIBRI_DB_URL",
    show_default=True,
    help="SQLAlchemy DB URL for reading progress and bookmarks.",
)


def _load(epub: Path):
    try:
        return load_document(epub)
    except ArchiveError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log parser decisions (skipped chapters, fallbacks).")
def cli(verbose: bool):
    """libri e-book utilities."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s: %(message)s")


@cli.command("info", help="Show title, author and chapters of an EPUB.")
@click.argument("epub", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def info(epub: Path):
    document = _load(epub)
    click.echo(f"Title:  {document.title or '-'}")
    click.echo(f"Author: {document.author or '-'}")
    if document.is_empty:
        click.echo("No content available.")
        return
    for index, chapter in enumerate(document.chapters):
        click.echo(f"{index:4d}  {chapter.title}  ({chapter.href})")


@cli.command("show", help="Print the body markup of one chapter.")
@click.argument("epub", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("index", type=int)
def show(epub: Path, index: int):
    document = _load(epub)
    if not 0 <= index < len(document.chapters):
        raise click.BadParameter(
            f"book has {len(document.chapters)} chapters", param_hint="INDEX"
        )
    click.echo(document.chapters[index].content)


@cli.command("progress", help="Show or set the last read chapter of a book.")
@click.argument("book_id")
@click.option("--set", "chapter_index", type=click.IntRange(min=0), help="Store this chapter index.")
@db_url_option
def progress(book_id: str, chapter_index: int | None, db_url: str):
    init_db(db_url)
    if chapter_index is not None:
        save_progress(book_id, chapter_index)
    click.echo(load_progress(book_id))


@cli.command("bookmark", help="Toggle the bookmark on a chapter of a book.")
@click.argument("book_id")
@click.argument("index", type=click.IntRange(min=0))
@db_url_option
def bookmark(book_id: str, index: int, db_url: str):
    init_db(db_url)
    toggle_bookmark(book_id, index)
    click.echo(" ".join(str(i) for i in get_bookmarks(book_id)) or "(none)")


@cli.command("serve", help="Run the reader web API.")
@click.option(
    "--library",
    "library_dir",
    envvar="LIBRI_LIBRARY",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory with downloaded <book_id>.epub files.",
)
@db_url_option
@click.option("--host", default="127.0.0.1")
@click.option("--port", default=5000, type=int)
@click.option("--debug/--no-debug", default=False)
def serve(library_dir: Path, db_url: str, host: str, port: int, debug: bool):
    """Run the libri web application."""
    from .web import create_app

    app = create_app(library_dir, db_url)
    click.echo(f"* Serving {library_dir} on http://{host}:{port} (debug={debug})")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":  # pragma: no cover
    cli()
