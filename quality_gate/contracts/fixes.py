"""
Fixes - Data structures for automatic repairs.

FixOutcome is what a single transform returns; AutoFixResult is what the
auto-fix engine returns after threading the markup through every
transform in priority order.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FixOutcome:
    """
    Output of one fix transform.

    `applied` is False when the condition was already satisfied or the
    transform could not find a safe place to act; `html` is then the
    input unchanged.
    """

    html: str
    applied: bool = False
    description: Optional[str] = None

    @classmethod
    def unchanged(cls, html: str) -> "FixOutcome":
        return cls(html=html, applied=False)


@dataclass
class AutoFixResult:
    """
    Result of applying the fixable rules to one document.

    Attributes:
        fixed: Repaired markup (identical to the input if nothing applied)
        applied_fixes: Descriptions of the transforms that changed the markup
        resolved_rule_ids: Rule ids whose transform applied
        remaining_issues: Findings of the input result left unresolved
    """

    fixed: str
    applied_fixes: List[str] = field(default_factory=list)
    resolved_rule_ids: List[str] = field(default_factory=list)
    remaining_issues: int = 0

    @property
    def changed(self) -> bool:
        """Check if any transform changed the markup."""
        return len(self.applied_fixes) > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "fixed": self.fixed,
            "appliedFixes": list(self.applied_fixes),
            "resolvedRuleIds": list(self.resolved_rule_ids),
            "remainingIssues": self.remaining_issues,
        }

    def describe(self) -> str:
        """Generate human-readable summary."""
        lines = [f"AutoFixResult: {len(self.applied_fixes)} fix(es) applied"]
        for fix in self.applied_fixes:
            lines.append(f"  + {fix}")
        lines.append(f"  Remaining issues: {self.remaining_issues}")
        return "\n".join(lines)
