"""
Contracts - Data structures for the quality gate.

Provides:
- Category, SeverityTier, Severity: closed classifications
- Finding, ScoreCard, ValidationResult: validation output
- CheckInput, Violation, SourceBlock: what rule checks consume and emit
- FixOutcome, AutoFixResult: repair output
"""

from .severity import Category, Severity, SeverityTier
from .findings import Finding, ScoreCard, ValidationResult
from .checks import CheckInput, SourceBlock, Violation
from .fixes import AutoFixResult, FixOutcome

__all__ = [
    "Category",
    "Severity",
    "SeverityTier",
    "Finding",
    "ScoreCard",
    "ValidationResult",
    "CheckInput",
    "SourceBlock",
    "Violation",
    "AutoFixResult",
    "FixOutcome",
]
