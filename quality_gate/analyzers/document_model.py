"""
Document Model - Read-only structural view of a markup string.

This module provides the foundation for every rule and fix transform.
It wraps BeautifulSoup (html.parser, which tolerates unclosed and
mismatched tags) and adds what rules need on top of the tree:
- the source offset of every start tag, derived from BeautifulSoup's
  line/column bookkeeping, plus the tag's end offset and attribute spans
- head/body/html boundaries
- an offset -> line index for reporting
- DOCTYPE detection that does not depend on the parser

The model is built fresh from a string and never patched. Fix transforms
rebuild it after every mutation, so offsets can never drift.

Construction never raises: if the parser rejects the markup the model
degrades to "no structure found" (no tags, no head/body).

Usage:
    doc = DocumentModel(html)
    for img in doc.find_all("img"):
        print(img.get("src"), doc.line_of(img.start))
"""

import logging
import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from bs4 import BeautifulSoup, NavigableString, Tag

from .tag_scanner import AttrSpan, StartTagSpan, scan_start_tag


logger = logging.getLogger(__name__)

_DOCTYPE_RE = re.compile(r"<!doctype\s+html\b", re.IGNORECASE)
_LEADING_SKIP = "\ufeff \t\r\n\f"


@dataclass
class TagRecord:
    """
    One start tag found in the document.

    `attrs` holds attribute values as BeautifulSoup parsed them (multi-valued
    attributes such as class/rel joined with spaces). `start`/`end` and
    `attr_spans` are None/empty when the raw tag could not be located.
    """

    name: str
    attrs: Dict[str, str]
    index: int
    """Position of the tag in document order."""

    element: Tag
    """Underlying BeautifulSoup element (for text and ancestry)."""

    start: Optional[int] = None
    name_end: Optional[int] = None
    end: Optional[int] = None
    attr_spans: Dict[str, AttrSpan] = field(default_factory=dict)

    @property
    def located(self) -> bool:
        """Check if raw offsets are known (required by fix transforms)."""
        return self.start is not None and self.end is not None

    def get(self, attr: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(attr, default)

    def has(self, attr: str) -> bool:
        return attr in self.attrs

    def __repr__(self) -> str:
        return f"TagRecord(<{self.name}> #{self.index} @ {self.start})"


class DocumentModel:
    """
    Best-effort structural facts about a markup string.

    Provides:
    - Tag inventory with attribute maps and offsets
    - Head/body/html lookup
    - Text extraction and ancestry checks
    - Inline script/style bodies
    - Offset to line mapping
    """

    def __init__(self, html: Optional[str]):
        """
        Build the model.

        Args:
            html: Raw markup (full document or fragment). None is treated
                  as an empty string.
        """
        self._source = html if isinstance(html, str) else ""
        self._line_starts = self._build_line_index(self._source)
        self._tags: List[TagRecord] = []
        self._by_name: Dict[str, List[TagRecord]] = {}
        self._degraded = False
        self._doctype_offset = self._find_doctype(self._source)

        try:
            # First duplicate attribute wins, matching scan_start_tag spans
            soup = BeautifulSoup(
                self._source, "html.parser", on_duplicate_attribute="ignore"
            )
            self._index_tags(soup)
        except Exception as e:
            logger.debug(f"DocumentModel degraded, parser rejected markup: {e}")
            self._tags = []
            self._by_name = {}
            self._degraded = True

    # =========================================================================
    # BASIC FACTS
    # =========================================================================

    @property
    def source(self) -> str:
        """Access the original markup string."""
        return self._source

    @property
    def degraded(self) -> bool:
        """True if the parser failed and no structure is available."""
        return self._degraded

    @property
    def is_blank(self) -> bool:
        return not self._source.strip()

    @property
    def has_doctype(self) -> bool:
        return self._doctype_offset is not None

    @property
    def doctype_offset(self) -> Optional[int]:
        """Offset of the leading `<!DOCTYPE html` declaration, if any."""
        return self._doctype_offset

    @property
    def tags(self) -> List[TagRecord]:
        """All start tags in document order."""
        return list(self._tags)

    @property
    def html_tag(self) -> Optional[TagRecord]:
        return self.first("html")

    @property
    def head(self) -> Optional[TagRecord]:
        return self.first("head")

    @property
    def body(self) -> Optional[TagRecord]:
        return self.first("body")

    # =========================================================================
    # TAG LOOKUP
    # =========================================================================

    def find_all(self, *names: str) -> List[TagRecord]:
        """
        Get all tags with any of the given names, in document order.

        Args:
            names: Lowercase tag names

        Returns:
            List of matching TagRecords (may be empty)
        """
        if len(names) == 1:
            return list(self._by_name.get(names[0], []))
        wanted = set(names)
        return [t for t in self._tags if t.name in wanted]

    def first(self, name: str) -> Optional[TagRecord]:
        records = self._by_name.get(name)
        return records[0] if records else None

    def find_with_attribute_prefix(self, prefix: str) -> List[TagRecord]:
        """Get all tags carrying at least one attribute starting with prefix."""
        return [
            t for t in self._tags
            if any(name.startswith(prefix) for name in t.attrs)
        ]

    def meta(self, **match: str) -> List[TagRecord]:
        """
        Get <meta> tags whose attributes match case-insensitively.

        Example:
            doc.meta(name="viewport")
        """
        results = []
        for record in self._by_name.get("meta", []):
            if all(
                (record.get(attr) or "").strip().lower() == value.lower()
                for attr, value in match.items()
            ):
                results.append(record)
        return results

    # =========================================================================
    # TEXT AND ANCESTRY
    # =========================================================================

    def text_of(self, record: TagRecord) -> str:
        """
        Get visible text content of an element with whitespace collapsed.
        """
        return " ".join(record.element.get_text(" ", strip=True).split())

    def raw_text_of(self, record: TagRecord) -> str:
        """Get the raw string content of a script/style element."""
        return "".join(
            str(child) for child in record.element.contents
            if isinstance(child, NavigableString)
        )

    def has_ancestor(self, record: TagRecord, name: str) -> bool:
        """Check if any ancestor of the element has the given tag name."""
        for parent in record.element.parents:
            if isinstance(parent, Tag) and parent.name == name:
                return True
        return False

    def in_body(self, record: TagRecord) -> bool:
        return self.has_ancestor(record, "body")

    def in_head(self, record: TagRecord) -> bool:
        return self.has_ancestor(record, "head")

    # =========================================================================
    # DERIVED INVENTORIES
    # =========================================================================

    @property
    def inline_script_records(self) -> List[TagRecord]:
        """JavaScript <script> elements without a src attribute."""
        return [
            s for s in self._by_name.get("script", [])
            if not s.has("src") and self._is_javascript(s)
        ]

    @property
    def inline_scripts(self) -> List[str]:
        """Bodies of <script> elements without a src attribute."""
        return [self.raw_text_of(s) for s in self.inline_script_records]

    @property
    def inline_styles(self) -> List[str]:
        """Bodies of <style> elements."""
        return [self.raw_text_of(s) for s in self._by_name.get("style", [])]

    @property
    def label_targets(self) -> Set[str]:
        """Ids referenced by <label for="..."> elements."""
        return {
            (label.get("for") or "").strip()
            for label in self._by_name.get("label", [])
            if (label.get("for") or "").strip()
        }

    def has_closing_tag(self, name: str) -> bool:
        """Check if the source contains a closing tag for name."""
        pattern = re.compile(rf"</{re.escape(name)}\s*>", re.IGNORECASE)
        return pattern.search(self._source) is not None

    # =========================================================================
    # LINES
    # =========================================================================

    def line_of(self, offset: Optional[int]) -> Optional[int]:
        """
        Map a source offset to a 1-indexed line number.

        Returns:
            Line number, or None if offset is None or out of range
        """
        if offset is None or offset < 0 or offset > len(self._source):
            return None
        return bisect_right(self._line_starts, offset)

    def line_of_record(self, record: TagRecord) -> Optional[int]:
        return self.line_of(record.start)

    # =========================================================================
    # PRIVATE METHODS
    # =========================================================================

    @staticmethod
    def _build_line_index(source: str) -> List[int]:
        # html.parser counts only "\n" as a line break; stay consistent with it
        starts = [0]
        pos = source.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = source.find("\n", pos + 1)
        return starts

    @staticmethod
    def _find_doctype(source: str) -> Optional[int]:
        """
        Find a DOCTYPE html declaration preceding all other content.

        Leading whitespace, a BOM and comments are skipped.
        """
        i = 0
        length = len(source)
        while i < length:
            while i < length and source[i] in _LEADING_SKIP:
                i += 1
            if source.startswith("<!--", i):
                close = source.find("-->", i + 4)
                if close == -1:
                    return None
                i = close + 3
                continue
            break
        if _DOCTYPE_RE.match(source, i):
            return i
        return None

    def _index_tags(self, soup: BeautifulSoup) -> None:
        for element in soup.descendants:
            if not isinstance(element, Tag):
                continue
            record = TagRecord(
                name=element.name,
                attrs=self._normalize_attrs(element),
                index=len(self._tags),
                element=element,
            )
            self._locate(record, element)
            self._tags.append(record)
            self._by_name.setdefault(record.name, []).append(record)

    def _locate(self, record: TagRecord, element: Tag) -> None:
        line = getattr(element, "sourceline", None)
        column = getattr(element, "sourcepos", None)
        if line is None or column is None or line < 1 or line > len(self._line_starts):
            return
        offset = self._line_starts[line - 1] + column
        span: Optional[StartTagSpan] = scan_start_tag(self._source, offset)
        if span is None or span.name != record.name:
            return
        record.start = span.start
        record.name_end = span.name_end
        record.end = span.end
        record.attr_spans = dict(span.attrs)

    @staticmethod
    def _normalize_attrs(element: Tag) -> Dict[str, str]:
        attrs: Dict[str, str] = {}
        for key, value in element.attrs.items():
            if isinstance(value, (list, tuple)):
                value = " ".join(value)
            attrs[key.lower()] = "" if value is None else str(value)
        return attrs

    @staticmethod
    def _is_javascript(record: TagRecord) -> bool:
        script_type = (record.get("type") or "").strip().lower()
        return script_type in ("", "module", "text/javascript", "application/javascript")

    def iter_records(self) -> Iterable[TagRecord]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __repr__(self) -> str:
        state = "degraded" if self._degraded else f"{len(self._tags)} tags"
        return f"DocumentModel({state}, doctype={self.has_doctype})"
