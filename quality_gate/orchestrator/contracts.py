"""
Orchestrator Contracts - Data structures for the gate pipeline.

Defines GatePhase, GateReport and RemediationResult.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..contracts.findings import ValidationResult
from ..contracts.fixes import AutoFixResult


class GatePhase(Enum):
    """
    Phases a document goes through in the gate.

    The flow is bounded: VALIDATE -> [AUTOFIX -> REVALIDATE [-> ROLLBACK]]
    -> COMPLETE, with at most one fix attempt.
    """

    VALIDATE = "validate"
    """Initial validation of the submitted markup."""

    AUTOFIX = "autofix"
    """Fix transforms applied."""

    REVALIDATE = "revalidate"
    """Validation of the repaired markup."""

    ROLLBACK = "rollback"
    """Repaired markup scored lower and was discarded."""

    COMPLETE = "complete"
    """Pipeline finished."""


@dataclass
class GateReport:
    """
    Outcome of one gate run.

    `html` is the markup the caller should keep: the repaired markup when
    a fix was accepted, the original otherwise.
    """

    original_html: str
    """Markup as submitted."""

    html: str
    """Markup after the gate (possibly identical to original_html)."""

    initial: ValidationResult
    """Validation of the submitted markup."""

    final: ValidationResult
    """Validation of `html` (same object as `initial` when nothing changed)."""

    fix: Optional[AutoFixResult] = None
    """Auto-fix result, None when no fix was attempted."""

    phases: List[GatePhase] = field(default_factory=list)
    """Phases that ran, in order."""

    duration_ms: float = 0.0
    """Wall time of the run."""

    @property
    def passed(self) -> bool:
        return self.final.passed

    @property
    def changed(self) -> bool:
        """Check if the gate returned different markup."""
        return self.html != self.original_html

    @property
    def improved(self) -> bool:
        """Check if the accepted fix raised the score."""
        return self.final.score > self.initial.score

    @property
    def rolled_back(self) -> bool:
        return GatePhase.ROLLBACK in self.phases

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "passed": self.passed,
            "improved": self.improved,
            "changed": self.changed,
            "phases": [phase.value for phase in self.phases],
            "durationMs": round(self.duration_ms, 2),
            "initial": self.initial.to_dict(),
            "autoFix": self.fix.to_dict() if self.fix else None,
            "final": self.final.to_dict(),
        }

    def describe(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"GateReport: {'PASSED' if self.passed else 'FAILED'}",
            f"  Score: {self.initial.score} -> {self.final.score} ({self.final.grade})",
            f"  Phases: {' -> '.join(p.value for p in self.phases)}",
            f"  Duration: {self.duration_ms:.0f}ms",
        ]
        if self.fix is not None:
            lines.append(f"  Fixes applied: {len(self.fix.applied_fixes)}")
            for description in self.fix.applied_fixes:
                lines.append(f"    + {description}")
        if self.rolled_back:
            lines.append("  Fix rolled back (score degraded)")
        return "\n".join(lines)


@dataclass
class RemediationResult:
    """
    Outcome of remediating one project file.

    Attributes:
        path: File path as given by the caller
        report: Gate report for the file content
        persist: True when the caller should write report.html back
    """

    path: str
    report: GateReport
    persist: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "persist": self.persist,
            "report": self.report.to_dict(),
        }
