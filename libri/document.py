"""Immutable values produced by the EPUB parser."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

__all__ = [
    "Chapter",
    "Document",
    "ManifestEntry",
    "PackageDocument",
]


@dataclass(frozen=True)
class ManifestEntry:
    """One markup item declared in the package manifest."""

    id: str
    href: str
    media_type: str
    title: Optional[str] = None


@dataclass(frozen=True)
class PackageDocument:
    """Metadata, manifest and spine read from the ``.opf`` document."""

    title: Optional[str] = None
    author: Optional[str] = None
    manifest: Mapping[str, ManifestEntry] = field(default_factory=lambda: MappingProxyType({}))
    spine: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Chapter:
    id: str
    title: str
    href: str  # as declared in the manifest, not the archive path
    content: str


@dataclass(frozen=True)
class Document:
    """A parsed book: metadata plus chapters in reading order.

    ``chapters`` may be empty; that is a valid outcome for books whose package
    document is missing or unreadable and should be shown as "no content".
    """

    title: Optional[str]
    author: Optional[str]
    chapters: Tuple[Chapter, ...]
    base_reference: str

    @property
    def is_empty(self) -> bool:
        return not self.chapters

    def clamp_index(self, index: int) -> int:
        """Coerce a stored chapter *index* into the valid range."""
        if not self.chapters:
            return 0
        return max(0, min(index, len(self.chapters) - 1))
