"""Parsing of RFC 5988 style ``Link`` headers used for pagination."""

from __future__ import annotations

import re
from email.message import Message
from typing import Iterator, List, Optional, Tuple

_URL_RE = re.compile(r"^\s*<\s*([^<>]*?)\s*>(.*)$", re.DOTALL)
_PARAM_RE = re.compile(r';\s*([^\s=;]+)\s*=\s*("[^"]*"|[^;]*)')


def split_segments(value: str) -> List[str]:
    """Split ``value`` on commas that are neither inside ``<...>`` nor quoted."""

    segments: List[str] = []
    current: List[str] = []
    in_url = False
    in_quotes = False
    for char in value:
        if in_quotes:
            in_quotes = char != '"'
        elif in_url:
            in_url = char != ">"
        elif char == "<":
            in_url = True
        elif char == '"':
            in_quotes = True
        elif char == ",":
            segments.append("".join(current))
            current = []
            continue
        current.append(char)
    segments.append("".join(current))
    return segments


def _relation(params: str) -> Optional[str]:
    if params.strip() and not params.lstrip().startswith(";"):
        return None
    for match in _PARAM_RE.finditer(params):
        name, raw = match.group(1), match.group(2).strip()
        if name.lower() != "rel":
            continue
        if len(raw) < 2 or not (raw.startswith('"') and raw.endswith('"')):
            return None
        return raw[1:-1]
    return None


def iter_links(value: Optional[str]) -> Iterator[Tuple[str, str]]:
    """Yield ``(url, rel)`` pairs for every well-formed segment of ``value``.

    Segments without an angle-bracketed URL or a quoted ``rel`` parameter of
    their own are skipped.
    """

    if not value:
        return
    # Folded headers carry CRLF plus indentation between segments.
    flattened = " ".join(value.split())
    for segment in split_segments(flattened):
        url_match = _URL_RE.match(segment)
        if url_match is None:
            continue
        rel = _relation(url_match.group(2))
        if rel is None:
            continue
        yield url_match.group(1), rel


def parse_next_link(value: Optional[str]) -> Optional[str]:
    """Return the URL tagged ``rel="next"`` or ``None``.

    The first ``next`` segment wins when the header lists several.
    """

    for url, rel in iter_links(value):
        if "next" in rel.lower().split():
            return url
    return None


def next_link_from_headers(headers: Optional[Message]) -> Optional[str]:
    """Apply :func:`parse_next_link` to every ``Link`` header in ``headers``."""

    if headers is None:
        return None
    values = headers.get_all("Link") or []
    return parse_next_link(", ".join(values))


__all__ = ["iter_links", "next_link_from_headers", "parse_next_link", "split_segments"]
