"""
ValidationEngine - Run the rule catalog against markup.

For every runnable rule, in catalog order, the engine:
1. Calls the rule's check with a shared CheckInput (one DocumentModel)
2. Wraps each returned Violation into a Finding carrying the rule's
   metadata and the scoring policy's weight
3. Isolates faults: a check that raises yields one internal.rule-error
   finding naming the rule, and the remaining rules still run

Findings are grouped by tier; within a tier they follow catalog order,
then emission order.

Usage:
    engine = ValidationEngine(build_default_catalog(settings))
    result = engine.validate_all(html, css, js)
    print(result.describe())
"""

import logging
import re
from typing import Iterable, List, Optional

from ..analyzers.document_model import DocumentModel
from ..catalog.rule_catalog import INTERNAL_RULE_ERROR, INTERNAL_RULE_ERROR_ID, RuleCatalog
from ..catalog.rule_spec import RuleSpec
from ..contracts.checks import CheckInput, Violation
from ..contracts.findings import Finding, ValidationResult
from ..contracts.severity import SeverityTier
from ..scoring.scoring_engine import ScoringEngine
from .source_scan import strip_css_literals, strip_js_literals


logger = logging.getLogger(__name__)

_HTML_END_RE = re.compile(r"</(?:html|body)\s*>", re.IGNORECASE)


class ValidationEngine:
    """
    Stateless validator bound to a catalog and a scoring engine.

    Safe to share between callers; every call builds its own
    DocumentModel.
    """

    def __init__(
        self,
        catalog: RuleCatalog,
        scoring_engine: Optional[ScoringEngine] = None,
    ):
        """
        Initialize the engine.

        Args:
            catalog: Rules to run
            scoring_engine: Weights and grading (default policy if None)
        """
        self._catalog = catalog
        self._scoring = scoring_engine or ScoringEngine()

    @property
    def catalog(self) -> RuleCatalog:
        return self._catalog

    @property
    def scoring_engine(self) -> ScoringEngine:
        return self._scoring

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate_all(
        self,
        html: Optional[str],
        css: Optional[str] = None,
        js: Optional[str] = None,
    ) -> ValidationResult:
        """
        Run every rule of the catalog.

        Args:
            html: Markup (full document or fragment); None counts as empty
            css: Optional separate stylesheet
            js: Optional separate script

        Returns:
            ValidationResult with grouped findings and the score card
        """
        doc = DocumentModel(html)
        ctx = CheckInput(doc=doc, css=css or "", js=js or "")

        findings: List[Finding] = []
        failed_rules = 0
        for rule in self._catalog.runnable_rules():
            try:
                violations = rule.check(ctx)
            except Exception as e:
                failed_rules += 1
                logger.error(f"Rule {rule.rule_id} failed: {e}")
                findings.append(self._rule_error(rule, e))
                continue

            for violation in violations:
                findings.append(self._to_finding(rule, violation))
            if violations:
                logger.debug(f"Rule {rule.rule_id}: {len(violations)} violation(s)")

        result = self._build_result(findings)
        logger.info(
            f"Validated {len(doc.source)} chars against "
            f"{len(self._catalog.runnable_rules())} rules: "
            f"{result.total} finding(s), score {result.score} ({result.grade}), "
            f"{result.status}"
            + (f", {failed_rules} rule(s) failed" if failed_rules else "")
        )
        return result

    def validate_rules(
        self,
        html: Optional[str],
        rule_ids: Iterable[str],
        css: Optional[str] = None,
        js: Optional[str] = None,
    ) -> ValidationResult:
        """
        Run only the given rules.

        The findings are a subset of what validate_all() reports, because
        checks never depend on each other.

        Raises:
            KeyError: If a rule id is not in the catalog
        """
        subset = ValidationEngine(self._catalog.subset(rule_ids), self._scoring)
        return subset.validate_all(html, css, js)

    # =========================================================================
    # PRIVATE METHODS
    # =========================================================================

    def _to_finding(self, rule: RuleSpec, violation: Violation) -> Finding:
        return Finding(
            rule_id=rule.rule_id,
            category=rule.category,
            tier=rule.tier,
            severity=rule.severity,
            weight=self._scoring.weight_for(rule.tier, rule.severity),
            message=violation.message,
            line=violation.line,
            fixable=rule.fixable,
            suggestion=rule.suggestion,
        )

    def _rule_error(self, rule: RuleSpec, error: Exception) -> Finding:
        internal = self._catalog.get(INTERNAL_RULE_ERROR_ID) or INTERNAL_RULE_ERROR
        return self._to_finding(
            internal,
            Violation(f"Rule {rule.rule_id} failed to run: {type(error).__name__}: {error}"),
        )

    def _build_result(self, findings: List[Finding]) -> ValidationResult:
        card = self._scoring.score(findings)
        return ValidationResult(
            score=card.score,
            grade=card.grade,
            passed=card.passed,
            errors=[f for f in findings if f.tier is SeverityTier.ERROR],
            warnings=[f for f in findings if f.tier is SeverityTier.WARNING],
            info=[f for f in findings if f.tier is SeverityTier.INFO],
        )


def is_code_complete(code: Optional[str], kind: str) -> bool:
    """
    Guess whether generated code was cut off mid-stream.

    Args:
        code: Generated source
        kind: "html", "css" or "js"

    Returns:
        False when the code looks truncated

    Raises:
        ValueError: For an unknown kind
    """
    text = (code or "").strip()
    kind = kind.strip().lower()

    if kind == "html":
        return _HTML_END_RE.search(text) is not None
    if kind == "css":
        stripped = strip_css_literals(text)
        return bool(text) and not text.endswith("{") and stripped.count("{") == stripped.count("}")
    if kind == "js":
        stripped = strip_js_literals(text)
        return bool(text) and not text.endswith("{") and stripped.count("{") == stripped.count("}")
    raise ValueError(f"Unknown code kind: {kind!r} (expected html, css or js)")
