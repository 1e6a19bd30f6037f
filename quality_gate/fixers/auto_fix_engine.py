"""
AutoFixEngine - Thread markup through the catalog's fix transforms.

The engine does not decide *whether* a rule needs fixing; each transform
re-checks the current markup and reports applied=False when there is
nothing to do. That keeps the engine idempotent: a second run over its own
output applies nothing.

Usage:
    engine = AutoFixEngine(catalog)
    result = engine.auto_fix(html, validation_result)
    if result.changed:
        save(result.fixed)
"""

import logging
from typing import List, Optional

from ..catalog.rule_catalog import RuleCatalog
from ..contracts.findings import ValidationResult
from ..contracts.fixes import AutoFixResult, FixOutcome


logger = logging.getLogger(__name__)


class AutoFixEngine:
    """
    Applies fixable rules in fix_priority order.

    Features:
    - Priority-ordered transform chain
    - Per-transform fault isolation
    - Remaining-issue count against the input validation result
    """

    def __init__(self, catalog: RuleCatalog):
        self._catalog = catalog

    @property
    def catalog(self) -> RuleCatalog:
        return self._catalog

    def auto_fix(
        self,
        html: Optional[str],
        validation_result: Optional[ValidationResult],
    ) -> AutoFixResult:
        """
        Apply every fix transform to the markup.

        Args:
            html: Markup to repair (None counts as empty)
            validation_result: Result of validating the same markup

        Returns:
            AutoFixResult with the repaired markup and applied fixes

        Raises:
            ValueError: If no validation result is given
        """
        if validation_result is None:
            raise ValueError("auto_fix requires the ValidationResult of the markup")

        current = html if isinstance(html, str) else ""
        applied: List[str] = []
        resolved: List[str] = []

        for rule in self._catalog.fixable_rules():
            try:
                outcome: FixOutcome = rule.fix(current)
            except Exception as e:
                logger.error(f"Fix {rule.rule_id} failed: {e}")
                continue

            if not outcome.applied:
                continue

            current = outcome.html
            applied.append(outcome.description or f"Applied fix for {rule.rule_id}")
            resolved.append(rule.rule_id)
            logger.debug(f"Fix {rule.rule_id}: {outcome.description}")

        remaining = sum(
            1 for finding in validation_result.findings
            if finding.rule_id not in resolved
        )

        logger.info(
            f"Auto-fix: {len(applied)} fix(es) applied"
            + (f" ({', '.join(resolved)})" if resolved else "")
            + f", {remaining} issue(s) remaining"
        )

        return AutoFixResult(
            fixed=current,
            applied_fixes=applied,
            resolved_rule_ids=resolved,
            remaining_issues=remaining,
        )
