"""
Severity - Closed classifications for rules and findings.

Every finding carries three labels:
- Category: which quality area the rule belongs to
- SeverityTier: which bucket of the report it lands in (error/warning/info)
- Severity: the sub-severity inside the tier, used for weighting

The scoring policy keys its weight table on (SeverityTier, Severity) and
refuses to build if any combination is missing.
"""

from enum import Enum


class Category(Enum):
    """Quality area a rule belongs to."""

    STRUCTURE = "structure"
    """Document skeleton, headings, syntax of embedded CSS/JS."""

    SEO = "seo"
    """Search and social metadata."""

    ACCESSIBILITY = "accessibility"
    """Heuristic approximations of common a11y defects."""

    PERFORMANCE = "performance"
    """Loading behaviour of images and scripts."""

    SECURITY = "security"
    """Unsafe links, handlers, sinks and leaked secrets."""

    INTERNAL = "internal"
    """Engine faults (a rule that crashed)."""

    @classmethod
    def from_string(cls, value: str) -> "Category":
        """Convert string to Category (case-insensitive)."""
        return cls(value.strip().lower())


class SeverityTier(Enum):
    """Report bucket of a finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Position of the tier in report order (errors first)."""
        return _TIER_ORDER.index(self)


class Severity(Enum):
    """Sub-severity inside a tier."""

    CRITICAL = "critical"
    """In the error tier this also forces an automatic fail."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


_TIER_ORDER = (SeverityTier.ERROR, SeverityTier.WARNING, SeverityTier.INFO)
