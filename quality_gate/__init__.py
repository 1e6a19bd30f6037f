"""
Quality Gate - Validation, scoring and auto-fix for generated markup.

Checks HTML documents and fragments (optionally with separate CSS and JS)
against a fixed rule catalog, scores the findings, and repairs the
fixable subset with idempotent, byte-preserving text transforms.

Architecture:
    Markup -> ValidationEngine -> ValidationResult (score, grade, findings)
                   |
                   v
             AutoFixEngine -> AutoFixResult (fixed markup, applied fixes)
                   |
                   v
             ValidationEngine -> final ValidationResult

Usage:
    from quality_gate import validate_all, auto_fix, run_quality_gate

    result = validate_all(html)
    if not result.passed:
        fixed = auto_fix(html, result).fixed

    report = run_quality_gate(html)
    print(report.describe())
"""

from functools import lru_cache
from typing import Iterable, Optional

from .catalog import RuleCatalog, RuleSpec, build_default_catalog
from .contracts import (
    AutoFixResult,
    Category,
    Finding,
    ScoreCard,
    Severity,
    SeverityTier,
    ValidationResult,
)
from .core.config import Settings, settings
from .fixers import AutoFixEngine
from .orchestrator import GatePhase, GateReport, QualityGatePipeline, RemediationResult
from .scoring import ScoringEngine, ScoringPolicy
from .validators import ValidationEngine, is_code_complete


@lru_cache(maxsize=1)
def default_pipeline() -> QualityGatePipeline:
    """Pipeline built once from the module settings."""
    return QualityGatePipeline(settings=settings)


def validate_all(
    html: Optional[str],
    css: Optional[str] = None,
    js: Optional[str] = None,
) -> ValidationResult:
    """Validate markup against the default catalog."""
    return default_pipeline().validator.validate_all(html, css, js)


def auto_fix(html: Optional[str], validation_result: Optional[ValidationResult]) -> AutoFixResult:
    """Apply the default catalog's fixes. Raises ValueError without a result."""
    return default_pipeline().fixer.auto_fix(html, validation_result)


def score(findings: Iterable[Finding]) -> ScoreCard:
    """Score findings with the default scoring policy."""
    return default_pipeline().validator.scoring_engine.score(findings)


def run_quality_gate(
    html: Optional[str],
    css: Optional[str] = None,
    js: Optional[str] = None,
    auto_fix: bool = True,
) -> GateReport:
    """Validate, repair once if needed, and re-validate."""
    return default_pipeline().run(html, css, js, auto_fix=auto_fix)


__all__ = [
    # Public API
    "validate_all",
    "auto_fix",
    "score",
    "run_quality_gate",
    "default_pipeline",
    "is_code_complete",
    # Engines
    "QualityGatePipeline",
    "ValidationEngine",
    "AutoFixEngine",
    "ScoringEngine",
    "ScoringPolicy",
    # Catalog
    "RuleCatalog",
    "RuleSpec",
    "build_default_catalog",
    # Contracts
    "AutoFixResult",
    "Category",
    "Finding",
    "GatePhase",
    "GateReport",
    "RemediationResult",
    "ScoreCard",
    "Severity",
    "SeverityTier",
    "ValidationResult",
    # Configuration
    "Settings",
    "settings",
]
