"""
Tag Scanner - Locate start-tag boundaries and attribute spans in raw markup.

BeautifulSoup tells us where a start tag begins (line/column) but not where
it ends or where each attribute sits. Auto-fixes need exact byte ranges so
they can splice the source without re-serializing the document, so this
module re-reads a single start tag from its `<` with a quote-aware,
single-pass scanner.

Usage:
    span = scan_start_tag('<a href="x" target=_blank>', 0)
    span.end                  # 26
    span.attrs["target"]      # AttrSpan(name="target", ...)
"""

from dataclasses import dataclass, field
from typing import Dict, Optional


_NAME_TERMINATORS = frozenset(" \t\n\r\f/>")
_ATTR_NAME_TERMINATORS = frozenset(" \t\n\r\f/>=")
_WHITESPACE = frozenset(" \t\n\r\f")


@dataclass(frozen=True)
class AttrSpan:
    """Location of one attribute inside a start tag."""

    name: str
    """Lowercased attribute name."""

    name_start: int
    name_end: int

    value_start: Optional[int] = None
    """Offset of the first value character (inside quotes), None if valueless."""

    value_end: Optional[int] = None
    """Offset just past the last value character (before the closing quote)."""

    quote: str = ""
    """Quote character around the value, empty if unquoted."""

    @property
    def has_value(self) -> bool:
        return self.value_start is not None


@dataclass(frozen=True)
class StartTagSpan:
    """Location of a complete start tag."""

    start: int
    """Offset of the opening `<`."""

    name_end: int
    """Offset just past the tag name; new attributes are inserted here."""

    end: int
    """Offset just past the closing `>`."""

    name: str
    attrs: Dict[str, AttrSpan] = field(default_factory=dict)


def scan_start_tag(source: str, offset: int) -> Optional[StartTagSpan]:
    """
    Scan the start tag beginning at `offset`.

    Args:
        source: Full markup string
        offset: Offset of the `<` character

    Returns:
        StartTagSpan, or None if the tag is malformed (unterminated quote,
        missing `>`, no name). Duplicate attributes keep the first span.
    """
    length = len(source)
    if offset < 0 or offset >= length or source[offset] != "<":
        return None

    i = offset + 1
    while i < length and source[i] not in _NAME_TERMINATORS:
        i += 1
    name = source[offset + 1:i].lower()
    if not name or not (name[0].isalpha()):
        return None
    name_end = i

    attrs: Dict[str, AttrSpan] = {}
    while i < length:
        ch = source[i]
        if ch in _WHITESPACE or ch == "/":
            i += 1
            continue
        if ch == ">":
            return StartTagSpan(
                start=offset, name_end=name_end, end=i + 1, name=name, attrs=attrs
            )

        name_start = i
        while i < length and source[i] not in _ATTR_NAME_TERMINATORS:
            i += 1
        if i == name_start:
            # Stray "=" with no attribute name
            i += 1
            continue
        attr_name = source[name_start:i].lower()
        attr_name_end = i

        j = i
        while j < length and source[j] in _WHITESPACE:
            j += 1
        if j >= length or source[j] != "=":
            attrs.setdefault(
                attr_name, AttrSpan(attr_name, name_start, attr_name_end)
            )
            continue

        j += 1
        while j < length and source[j] in _WHITESPACE:
            j += 1
        if j >= length:
            return None

        quote = source[j]
        if quote in ("'", '"'):
            close = source.find(quote, j + 1)
            if close == -1:
                return None
            span = AttrSpan(attr_name, name_start, attr_name_end, j + 1, close, quote)
            i = close + 1
        else:
            k = j
            while k < length and source[k] not in _WHITESPACE and source[k] != ">":
                k += 1
            span = AttrSpan(attr_name, name_start, attr_name_end, j, k, "")
            i = k
        attrs.setdefault(attr_name, span)

    return None
