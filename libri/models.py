"""SQLAlchemy ORM models for per-book reading state."""

from __future__ import annotations

from sqlalchemy import Integer, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

DEFAULT_DB_URL = "sqlite:///libri.db"


class Base(DeclarativeBase):
    pass


class ReadingProgress(Base):
    __tablename__ = "reading_progress"

    book_id: Mapped[str] = mapped_column(String, primary_key=True)
    chapter_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ReadingProgress {self.book_id} @ {self.chapter_index}>"


class Bookmark(Base):
    __tablename__ = "bookmarks"

    book_id: Mapped[str] = mapped_column(String, primary_key=True)
    chapter_index: Mapped[int] = mapped_column(Integer, primary_key=True)


# database helpers

_engine = None
_Session = None


def init_db(url: str = DEFAULT_DB_URL) -> None:
    """Create engine, create tables if not exist, globally store session factory."""
    global _engine, _Session
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(url, future=True)
    Base.metadata.create_all(_engine)
    _Session = sessionmaker(_engine, expire_on_commit=False, future=True)


def get_session():
    if _Session is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _Session()
