"""
Checks - What a rule check receives and what it reports.

A check is a plain function `(CheckInput) -> list[Violation]`. It only
describes *what* is wrong and *where*; the validation engine attaches the
rule's id, category, tier, weight and suggestion to build a Finding.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ..analyzers.document_model import DocumentModel


@dataclass(frozen=True)
class Violation:
    """One occurrence reported by a check."""

    message: str
    line: Optional[int] = None


@dataclass(frozen=True)
class SourceBlock:
    """
    A block of CSS or JS to inspect.

    Attributes:
        text: Block content
        offset: Offset of the first character within the markup, None when
                the block came from a separate CSS/JS input
        label: Short name used in messages ("inline <script> #2", "JS input")
    """

    text: str
    offset: Optional[int]
    label: str


@dataclass(frozen=True)
class CheckInput:
    """Everything a rule check may look at."""

    doc: "DocumentModel"
    css: str = ""
    js: str = ""

    @property
    def scripts(self) -> List[SourceBlock]:
        """Inline JavaScript blocks followed by the separate JS input."""
        blocks = []
        for number, record in enumerate(self.doc.inline_script_records, 1):
            blocks.append(SourceBlock(
                text=self.doc.raw_text_of(record),
                offset=record.end,
                label=f"inline <script> #{number}",
            ))
        if self.js and self.js.strip():
            blocks.append(SourceBlock(text=self.js, offset=None, label="JS input"))
        return blocks

    @property
    def stylesheets(self) -> List[SourceBlock]:
        """Inline <style> blocks followed by the separate CSS input."""
        blocks = []
        for number, record in enumerate(self.doc.find_all("style"), 1):
            blocks.append(SourceBlock(
                text=self.doc.raw_text_of(record),
                offset=record.end,
                label=f"inline <style> #{number}",
            ))
        if self.css and self.css.strip():
            blocks.append(SourceBlock(text=self.css, offset=None, label="CSS input"))
        return blocks

    def line_in(self, block: SourceBlock, position: int) -> Optional[int]:
        """Map a position inside a block to a markup line (None for inputs)."""
        if block.offset is None:
            return None
        return self.doc.line_of(block.offset + position)
