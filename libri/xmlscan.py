"""Event-driven scanning of small XML documents.

Uses an :class:`xml.etree.ElementTree.XMLParser` with a collecting target, so
no element tree is built; callers iterate ``start`` / ``text`` / ``end``
events and may stop as soon as they have what they need.  Element names are
reported by local name only (``{ns}title`` and ``dc:title`` both become
``title``).
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, NamedTuple, Optional

__all__ = ["XmlEvent", "local_name", "scan"]

CHUNK_SIZE = 16 * 1024


class XmlEvent(NamedTuple):
    kind: str  # "start", "text" or "end"
    name: str = ""
    attrib: Optional[Dict[str, str]] = None
    text: str = ""


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` or ``prefix:`` qualifier from *tag*."""
    if "}" in tag:
        tag = tag.rsplit("}", 1)[1]
    return tag.rsplit(":", 1)[-1]


class _Collector:
    """Parser target that turns callbacks into queued events."""

    def __init__(self) -> None:
        self.events: List[XmlEvent] = []

    def start(self, tag, attrib):
        self.events.append(XmlEvent("start", local_name(tag), dict(attrib)))

    def end(self, tag):
        self.events.append(XmlEvent("end", local_name(tag)))

    def data(self, text):
        self.events.append(XmlEvent("text", text=text))

    def close(self):
        return None

    def drain(self) -> List[XmlEvent]:
        events, self.events = self.events, []
        return events


def scan(markup: str | bytes, *, chunk_size: int = CHUNK_SIZE) -> Iterator[XmlEvent]:
    """Yield :class:`XmlEvent` items for *markup* in document order.

    Raises :class:`xml.etree.ElementTree.ParseError` when the markup is not
    well-formed; events preceding the error are still yielded first.
    """
    collector = _Collector()
    parser = ET.XMLParser(target=collector)
    try:
        for offset in range(0, len(markup), chunk_size):
            parser.feed(markup[offset : offset + chunk_size])
            yield from collector.drain()
        parser.close()
    except ET.ParseError:
        yield from collector.drain()
        raise
    yield from collector.drain()
