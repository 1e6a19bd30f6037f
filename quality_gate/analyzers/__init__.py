"""
Analyzers - Structural analysis of markup.

This module provides the read-only view every rule and fix works from:
- DocumentModel: tag inventory, offsets, head/body, line index
- scan_start_tag: exact start-tag and attribute spans for splicing
- AboveFoldClassifier: which images must not be lazy-loaded

Usage:
    from quality_gate.analyzers import DocumentModel, AboveFoldClassifier

    doc = DocumentModel(html)
    candidates = AboveFoldClassifier().lazy_candidates(doc)
"""

from .tag_scanner import AttrSpan, StartTagSpan, scan_start_tag
from .document_model import DocumentModel, TagRecord
from .fold_classifier import AboveFoldClassifier, FoldReason

__all__ = [
    "AttrSpan",
    "StartTagSpan",
    "scan_start_tag",
    "DocumentModel",
    "TagRecord",
    "AboveFoldClassifier",
    "FoldReason",
]
