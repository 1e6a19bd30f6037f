"""
Above-the-fold Classifier - Decide which images must stay eagerly loaded.

Lazy-loading an image the user sees on first paint makes the page feel
slower, so both the lazy-loading rule and its auto-fix consult this
classifier and agree on which images are candidates.

An image is "likely above the fold" when any of these match:
- its class, id or alt contains a configured keyword (hero, logo, banner)
- it is among the first N images inside <body>
- it sits inside a <header> element
- it starts within the leading fraction of the document

Usage:
    classifier = AboveFoldClassifier(keywords=["hero"], first_n=2)
    candidates = classifier.lazy_candidates(doc)
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional

from .document_model import DocumentModel, TagRecord


class FoldReason(Enum):
    """Why an image was classified as above the fold."""

    KEYWORD = "keyword"
    LEADING_IMAGE = "leading_image"
    IN_HEADER = "in_header"
    LEADING_BYTES = "leading_bytes"


class AboveFoldClassifier:
    """
    Heuristic classifier for images visible without scrolling.

    The heuristics encode layout assumptions, so every threshold is
    explicit configuration rather than a literal.
    """

    DEFAULT_KEYWORDS = ("hero", "logo", "banner")

    def __init__(
        self,
        keywords: Optional[Iterable[str]] = None,
        first_n: int = 0,
        byte_ratio: float = 0.10,
    ):
        """
        Initialize the classifier.

        Args:
            keywords: Case-insensitive substrings matched against class/id/alt
            first_n: Number of leading <body> images treated as above the fold
            byte_ratio: Leading fraction of the document treated as above the fold
        """
        if first_n < 0:
            raise ValueError("first_n must be >= 0")
        if not 0.0 <= byte_ratio <= 1.0:
            raise ValueError("byte_ratio must be within [0, 1]")
        source = self.DEFAULT_KEYWORDS if keywords is None else keywords
        self._keywords = tuple(kw.strip().lower() for kw in source if kw and kw.strip())
        self._first_n = first_n
        self._byte_ratio = byte_ratio

    @classmethod
    def from_settings(cls, settings) -> "AboveFoldClassifier":
        """Build a classifier from a Settings instance."""
        return cls(
            keywords=settings.ABOVE_FOLD_KEYWORDS,
            first_n=settings.ABOVE_FOLD_IMAGE_COUNT,
            byte_ratio=settings.ABOVE_FOLD_BYTE_RATIO,
        )

    @property
    def keywords(self) -> tuple:
        return self._keywords

    @property
    def first_n(self) -> int:
        return self._first_n

    @property
    def byte_ratio(self) -> float:
        return self._byte_ratio

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    def classify(self, doc: DocumentModel) -> Dict[int, Optional[FoldReason]]:
        """
        Classify every <img> of the document.

        Returns:
            Mapping of TagRecord.index -> FoldReason (None = below the fold)
        """
        images = doc.find_all("img")
        body_images = [img for img in images if doc.in_body(img)] if doc.body else images
        leading = {img.index for img in body_images[: self._first_n]}
        cutoff = len(doc.source) * self._byte_ratio

        result: Dict[int, Optional[FoldReason]] = {}
        for img in images:
            result[img.index] = self._reason(doc, img, leading, cutoff)
        return result

    def is_above_fold(self, doc: DocumentModel, record: TagRecord) -> bool:
        """Check a single image. Prefer classify() when checking many."""
        return self.classify(doc).get(record.index) is not None

    def lazy_candidates(self, doc: DocumentModel) -> List[TagRecord]:
        """
        Get images that should carry loading="lazy" but don't.

        An image with any explicit loading attribute is left alone, and so
        is one whose raw start tag could not be located (it cannot be
        patched in place).
        """
        reasons = self.classify(doc)
        return [
            img for img in doc.find_all("img")
            if img.located
            and not img.has("loading")
            and reasons.get(img.index) is None
        ]

    def _reason(
        self,
        doc: DocumentModel,
        img: TagRecord,
        leading: set,
        cutoff: float,
    ) -> Optional[FoldReason]:
        if self._matches_keyword(img):
            return FoldReason.KEYWORD
        if img.index in leading:
            return FoldReason.LEADING_IMAGE
        if doc.has_ancestor(img, "header"):
            return FoldReason.IN_HEADER
        if img.start is not None and img.start < cutoff:
            return FoldReason.LEADING_BYTES
        return None

    def _matches_keyword(self, img: TagRecord) -> bool:
        haystack = " ".join(
            (img.get(attr) or "") for attr in ("class", "id", "alt")
        ).lower()
        return any(kw in haystack for kw in self._keywords)

    def __repr__(self) -> str:
        return (
            f"AboveFoldClassifier(keywords={list(self._keywords)}, "
            f"first_n={self._first_n}, byte_ratio={self._byte_ratio})"
        )
