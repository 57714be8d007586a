"""Locate the package document through ``META-INF/container.xml``.

Producers get the container wrong often enough that every failure here falls
back to the conventional ``OEBPS/content.opf`` location instead of raising.
A ``rootfile`` whose ``full-path`` is empty or blank does not count; the scan
moves on to the next one.
"""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Optional

from .archive import Archive
from .xmlscan import scan

__all__ = ["CONTAINER_PATH", "DEFAULT_PACKAGE_PATH", "find_rootfile", "locate_package"]

logger = logging.getLogger(__name__)

CONTAINER_PATH = "META-INF/container.xml"
DEFAULT_PACKAGE_PATH = "OEBPS/content.opf"


def find_rootfile(markup: str | bytes) -> Optional[str]:
    """Return ``full-path`` of the first ``rootfile`` element, if any."""
    try:
        for event in scan(markup):
            if event.kind != "start" or event.name != "rootfile":
                continue
            full_path = (event.attrib.get("full-path") or "").strip()
            if full_path:
                return full_path
    except ET.ParseError as exc:
        logger.warning("Malformed container descriptor: %s", exc)
    return None


def locate_package(archive: Archive) -> str:
    raw = archive.read(CONTAINER_PATH)
    if raw is None:
        logger.debug("%s has no %s, assuming %s", archive.path, CONTAINER_PATH, DEFAULT_PACKAGE_PATH)
        return DEFAULT_PACKAGE_PATH
    full_path = find_rootfile(raw)
    if full_path is None:
        logger.warning("No usable rootfile in %s, assuming %s", archive.path, DEFAULT_PACKAGE_PATH)
        return DEFAULT_PACKAGE_PATH
    return full_path
