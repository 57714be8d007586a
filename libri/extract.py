"""
Lightweight title/body extraction from chapter markup.

These are plain regular-expression slices, not a markup parser.  Nested
elements with the same name, or foreign markup carrying its own ``<title>``
(inline SVG, MathML), can produce a wrong slice; that approximation is
accepted in exchange for never failing on broken documents.
"""
from __future__ import annotations

import re
from typing import Optional

__all__ = ["extract_body", "extract_title", "strip_tags"]

_BODY_RE = re.compile(r"<body[^>]*>(.*?)</body>", re.DOTALL)
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.DOTALL)
_HEADING_RE = re.compile(r"<h[12][^>]*>(.*?)</h[12]>", re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")


def strip_tags(fragment: str) -> str:
    return _TAG_RE.sub("", fragment)


def extract_body(markup: str) -> str:
    """Return the trimmed inner markup of ``<body>``.

    Documents without a body element are assumed to be a fragment already and
    are returned unchanged.
    """
    m = _BODY_RE.search(markup)
    if m is None:
        return markup
    return m.group(1).strip()


def extract_title(markup: str) -> Optional[str]:
    """Return ``<title>`` text, else the first ``<h1>``/``<h2>`` text, else None."""
    m = _TITLE_RE.search(markup)
    if m:
        title = m.group(1).strip()
        if title:
            return title

    m = _HEADING_RE.search(markup)
    if m:
        heading = strip_tags(m.group(1)).strip()
        if heading:
            return heading
    return None
