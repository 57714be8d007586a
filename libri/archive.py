"""
Reading entries out of an EPUB (zip) archive.

Entries are read fully into memory; chapter documents are small and the
callers need the whole markup anyway.  The archive handle is owned by an
:class:`Archive` object that is meant to be used as a context manager so it is
released on every exit path, including errors raised while reading.
"""
from __future__ import annotations

import logging
import lzma
import zipfile
import zlib
from pathlib import Path
from typing import List, Optional

__all__ = [
    "Archive",
    "ArchiveError",
    "ArchiveOpenError",
    "ArchiveReadError",
    "open_archive",
]

logger = logging.getLogger(__name__)


class ArchiveError(RuntimeError):
    pass


class ArchiveOpenError(ArchiveError):
    """The archive could not be opened at all."""


class ArchiveReadError(ArchiveError):
    """An existing entry could not be read (corrupt data, I/O failure)."""


class Archive:
    """Open zip archive resolving entry names to bytes."""

    def __init__(self, path: Path, zf: zipfile.ZipFile):
        self.path = path
        self._zf: zipfile.ZipFile | None = zf

    def __enter__(self) -> "Archive":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self) -> str:  # pragma: no cover
        state = "closed" if self.closed else "open"
        return f"<Archive {self.path} ({state})>"

    @property
    def closed(self) -> bool:
        return self._zf is None

    def names(self) -> List[str]:
        return self._handle().namelist()

    def read(self, entry: str) -> Optional[bytes]:
        """Return the bytes of *entry* or ``None`` if the archive lacks it."""
        zf = self._handle()
        try:
            info = zf.getinfo(entry)
        except KeyError:
            return None
        try:
            return zf.read(info)
        except (
            zipfile.BadZipFile,
            zlib.error,
            lzma.LZMAError,
            OSError,
            EOFError,
            NotImplementedError,  # unsupported compression method
            RuntimeError,  # encrypted entry
        ) as exc:
            raise ArchiveReadError(f"Cannot read {entry!r} from {self.path}: {exc}") from exc

    def close(self) -> None:
        if self._zf is None:
            return
        zf, self._zf = self._zf, None
        zf.close()
        logger.debug("Closed archive %s", self.path)

    def _handle(self) -> zipfile.ZipFile:
        if self._zf is None:
            raise ValueError(f"Archive {self.path} is closed")
        return self._zf


def open_archive(path: Path | str) -> Archive:
    """Open the zip archive at *path*.

    Raises :class:`ArchiveOpenError` if the file is missing, unreadable or is
    not a zip archive.
    """
    path = Path(path).expanduser()
    try:
        zf = zipfile.ZipFile(path)
    except (zipfile.BadZipFile, OSError) as exc:
        raise ArchiveOpenError(f"Cannot open archive {path}: {exc}") from exc
    logger.debug("Opened archive %s (%d entries)", path, len(zf.namelist()))
    return Archive(path, zf)
