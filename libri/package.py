"""Parser for the EPUB package document (``content.opf``).

The package document is scanned as a stream of events rather than built into
a tree.  Parsing state (current element, whether we are inside
``<metadata>``) is an immutable :class:`ScanState` value advanced by
:func:`advance` for every event, so the scan can be tested event by event.

Only the parts the reader needs are collected:

* ``dc:title`` / ``dc:creator`` inside ``<metadata>`` (first non-empty text
  wins; text before a child element such as ``<span>`` counts),
* ``<item>`` entries whose media type is markup (``html`` or ``xml``),
* ``<itemref idref=...>`` entries of the spine, in order.  An empty
  ``idref=""`` is treated like a missing one and skipped.

Example:
>>> pkg = parse_package(opf_bytes)
>>> [pkg.manifest[idref].href for idref in pkg.spine if idref in pkg.manifest]
"""
from __future__ import annotations

import dataclasses
import logging
import xml.etree.ElementTree as ET
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .document import ManifestEntry, PackageDocument
from .xmlscan import XmlEvent, scan

__all__ = ["PackageParser", "ScanState", "advance", "parse_package"]

logger = logging.getLogger(__name__)

_TITLE_TAGS = frozenset({"title"})
_AUTHOR_TAGS = frozenset({"creator", "author"})
_MARKUP_HINTS = ("html", "xml")
_METADATA_TAGS = _TITLE_TAGS | _AUTHOR_TAGS


@dataclasses.dataclass(frozen=True)
class ScanState:
    current: str = ""
    in_metadata: bool = False
    field: str = ""  # metadata element whose text is being collected
    text: str = ""


def advance(state: ScanState, event: XmlEvent) -> ScanState:
    """Return the state following *event*.

    Collected text is reset at every tag boundary; the caller takes it before
    advancing, so the first non-empty run inside a field wins even when the
    field has child elements.
    """
    if event.kind == "start":
        in_metadata = state.in_metadata or event.name == "metadata"
        field = state.field
        if not field and in_metadata and event.name in _METADATA_TAGS:
            field = event.name
        return ScanState(current=event.name, in_metadata=in_metadata, field=field)
    if event.kind == "text":
        if not state.field:
            return state
        return dataclasses.replace(state, text=state.text + event.text)
    return ScanState(
        in_metadata=state.in_metadata and event.name != "metadata",
        field="" if event.name == state.field else state.field,
    )


class PackageParser:
    """Collect metadata, manifest and spine from a package document."""

    def __init__(self, markup_hints: tuple[str, ...] = _MARKUP_HINTS) -> None:
        self.markup_hints = markup_hints

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    def parse(self, markup: str | bytes) -> PackageDocument:
        """Return a :class:`PackageDocument` for *markup*.

        Markup that is not well-formed yields an empty package document; the
        caller then sees a book without chapters instead of an exception.
        """
        title: Optional[str] = None
        author: Optional[str] = None
        manifest: Dict[str, ManifestEntry] = {}
        spine: List[str] = []

        state = ScanState()
        try:
            for event in scan(markup):
                if event.kind != "text" and state.field:
                    text = state.text.strip()
                    if text:
                        if state.field in _TITLE_TAGS and title is None:
                            title = text
                        elif state.field in _AUTHOR_TAGS and author is None:
                            author = text
                if event.kind == "start":
                    if event.name == "item":
                        entry = self._manifest_entry(event.attrib)
                        if entry is not None:
                            if entry.id in manifest:
                                logger.debug("Manifest id %r declared twice, keeping the last", entry.id)
                            manifest[entry.id] = entry
                    elif event.name == "itemref":
                        idref = event.attrib.get("idref")
                        if idref:
                            spine.append(idref)
                state = advance(state, event)
        except ET.ParseError as exc:
            logger.warning("Malformed package document: %s", exc)
            return PackageDocument()

        return PackageDocument(
            title=title,
            author=author,
            manifest=MappingProxyType(manifest),
            spine=tuple(spine),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _manifest_entry(self, attrib: Mapping[str, str]) -> Optional[ManifestEntry]:
        item_id = attrib.get("id")
        href = attrib.get("href")
        media_type = attrib.get("media-type")
        if item_id is None or href is None or media_type is None:
            return None
        if not any(hint in media_type for hint in self.markup_hints):
            return None
        return ManifestEntry(id=item_id, href=href, media_type=media_type)


def parse_package(markup: str | bytes) -> PackageDocument:
    return PackageParser().parse(markup)
