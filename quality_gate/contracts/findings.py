"""
Findings - Data structures produced by validation and scoring.

These structures carry information out of the validation pipeline:
1. Finding: a single detected issue tied to one catalog rule
2. ScoreCard: numeric score, letter grade and pass/fail flag
3. ValidationResult: findings grouped by tier plus the score card

Serialized keys follow the external JSON contract (camelCase), so the
report UI and the generation pipeline can consume `to_dict()` directly.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from .severity import Category, Severity, SeverityTier


@dataclass(frozen=True)
class Finding:
    """
    A single detected issue.

    Example:
        finding = Finding(
            rule_id="structure.doctype",
            category=Category.STRUCTURE,
            tier=SeverityTier.ERROR,
            severity=Severity.HIGH,
            weight=10,
            message="Missing <!DOCTYPE html> declaration",
            fixable=True,
        )
    """

    rule_id: str
    """Stable id of the rule that produced this finding."""

    category: Category
    """Quality area of the rule."""

    tier: SeverityTier
    """Report bucket (error/warning/info)."""

    severity: Severity
    """Sub-severity used for weighting."""

    weight: int
    """Points deducted from the score for this finding."""

    message: str
    """Human-readable description of the issue."""

    line: Optional[int] = None
    """1-indexed source line, when the issue maps to one location."""

    fixable: bool = False
    """Whether the rule has a deterministic auto-fix transform."""

    suggestion: Optional[str] = None
    """Hint telling the author how to resolve the issue."""

    @property
    def is_critical_error(self) -> bool:
        """Error-tier critical findings force an automatic fail."""
        return self.tier is SeverityTier.ERROR and self.severity is Severity.CRITICAL

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: Dict[str, Any] = {
            "ruleId": self.rule_id,
            "category": self.category.value,
            "severityTier": self.tier.value,
            "severity": self.severity.value,
            "severityWeight": self.weight,
            "message": self.message,
            "fixable": self.fixable,
        }
        if self.line is not None:
            result["line"] = self.line
        if self.suggestion:
            result["suggestion"] = self.suggestion
        return result

    def describe(self) -> str:
        """Generate human-readable description."""
        location = f" (line {self.line})" if self.line is not None else ""
        fix = " [auto-fixable]" if self.fixable else ""
        return (
            f"[{self.tier.value}/{self.severity.value}] {self.rule_id}: "
            f"{self.message}{location}{fix}"
        )


@dataclass(frozen=True)
class ScoreCard:
    """
    Reduction of a finding list to score, grade and pass/fail.

    Grade and passed are independent signals: a document can carry a
    "C" and still fail because a critical rule fired.
    """

    score: int
    grade: str
    passed: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "grade": self.grade, "passed": self.passed}


@dataclass
class ValidationResult:
    """
    Result of running the rule catalog against one document.

    Findings are grouped by tier; within a tier they keep catalog order.
    """

    score: int
    grade: str
    passed: bool
    errors: List[Finding] = field(default_factory=list)
    warnings: List[Finding] = field(default_factory=list)
    info: List[Finding] = field(default_factory=list)

    @property
    def findings(self) -> List[Finding]:
        """All findings, errors first."""
        return [*self.errors, *self.warnings, *self.info]

    @property
    def total(self) -> int:
        return len(self.errors) + len(self.warnings) + len(self.info)

    @property
    def has_critical(self) -> bool:
        """Check if any error-tier critical finding is present."""
        return any(f.is_critical_error for f in self.errors)

    @property
    def status(self) -> str:
        return "passed" if self.passed else "failed"

    @property
    def summary(self) -> Dict[str, Any]:
        """Counts and headline numbers for report headers."""
        return {
            "total": self.total,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "info": len(self.info),
            "score": self.score,
            "grade": self.grade,
            "status": self.status,
        }

    def rule_ids(self) -> Set[str]:
        """Ids of every rule that produced at least one finding."""
        return {f.rule_id for f in self.findings}

    def findings_for(self, rule_id: str) -> List[Finding]:
        """Get all findings produced by a specific rule."""
        return [f for f in self.findings if f.rule_id == rule_id]

    def fixable_findings(self) -> List[Finding]:
        return [f for f in self.findings if f.fixable]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "score": self.score,
            "grade": self.grade,
            "passed": self.passed,
            "errors": [f.to_dict() for f in self.errors],
            "warnings": [f.to_dict() for f in self.warnings],
            "info": [f.to_dict() for f in self.info],
            "summary": self.summary,
        }

    def describe(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"ValidationResult: {self.status.upper()} "
            f"(score {self.score}, grade {self.grade})",
            f"  Errors: {len(self.errors)}  Warnings: {len(self.warnings)}  "
            f"Info: {len(self.info)}",
        ]
        for finding in self.findings[:10]:
            lines.append(f"    - {finding.describe()}")
        if self.total > 10:
            lines.append(f"    ... and {self.total - 10} more")
        return "\n".join(lines)
