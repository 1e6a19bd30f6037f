"""
QualityGatePipeline - Validate, optionally repair, and re-validate markup.

Flow:
1. VALIDATE the submitted markup
2. If it did not pass (and auto_fix is enabled): AUTOFIX, then REVALIDATE
3. If the repaired markup scores lower, ROLLBACK to the original
4. COMPLETE with a GateReport

There is exactly one fix attempt and no retries; everything is
synchronous and in-memory.

Usage:
    pipeline = QualityGatePipeline()
    report = pipeline.run(html)
    if report.changed:
        html = report.html
"""

import logging
import time
from pathlib import PurePosixPath
from typing import Optional

from ..catalog.rule_catalog import RuleCatalog
from ..core.config import Settings
from ..fixers.auto_fix_engine import AutoFixEngine
from ..monitoring.logger import GateLogger
from ..scoring.scoring_engine import ScoringEngine, ScoringPolicy
from ..validators.validation_engine import ValidationEngine
from .contracts import GatePhase, GateReport, RemediationResult


logger = logging.getLogger(__name__)


# Page-level rules that make no sense for a component file (.tsx/.jsx)
DOCUMENT_LEVEL_RULE_IDS = frozenset({
    "structure.doctype",
    "structure.charset",
    "structure.viewport",
    "structure.html-lang",
    "structure.body",
    "structure.truncated",
    "structure.title",
    "structure.h1-missing",
    "seo.meta-description",
    "seo.open-graph",
    "accessibility.main-landmark",
})

PAGE_EXTENSIONS = (".html",)
COMPONENT_EXTENSIONS = (".tsx", ".jsx")


class QualityGatePipeline:
    """
    Orchestrates validation and auto-fix for one document at a time.

    The pipeline holds only immutable collaborators (catalog, scoring
    policy), so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog: Optional[RuleCatalog] = None,
        scoring_engine: Optional[ScoringEngine] = None,
        gate_logger: Optional[GateLogger] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            settings: Settings (module settings if None)
            catalog: Rules to run (default catalog built from settings if None)
            scoring_engine: Scoring (policy built from settings if None)
            gate_logger: Structured event logger
        """
        if settings is None:
            from ..core.config import settings as default_settings
            settings = default_settings
        if catalog is None:
            from ..catalog.default_catalog import build_default_catalog
            catalog = build_default_catalog(settings)

        self._settings = settings
        self._catalog = catalog
        self._scoring = scoring_engine or ScoringEngine(ScoringPolicy.from_settings(settings))
        self._validator = ValidationEngine(catalog, self._scoring)
        self._fixer = AutoFixEngine(catalog)
        self._gate_logger = gate_logger or GateLogger()
        self._component_pipeline: Optional["QualityGatePipeline"] = None

    @property
    def catalog(self) -> RuleCatalog:
        return self._catalog

    @property
    def validator(self) -> ValidationEngine:
        return self._validator

    @property
    def fixer(self) -> AutoFixEngine:
        return self._fixer

    # =========================================================================
    # GATE
    # =========================================================================

    def run(
        self,
        html: Optional[str],
        css: Optional[str] = None,
        js: Optional[str] = None,
        auto_fix: bool = True,
        always_fix: bool = False,
    ) -> GateReport:
        """
        Run the gate on one document.

        Args:
            html: Markup to check (None counts as empty)
            css: Optional separate stylesheet
            js: Optional separate script
            auto_fix: Attempt repairs when the first validation fails
            always_fix: Attempt repairs even when it passes

        Returns:
            GateReport

        Raises:
            ValueError: If the combined input exceeds MAX_MARKUP_CHARS
        """
        source = html if isinstance(html, str) else ""
        size = len(source) + len(css or "") + len(js or "")
        limit = self._settings.MAX_MARKUP_CHARS
        if size > limit:
            raise ValueError(f"Input too large: {size} chars (limit {limit})")

        start_time = time.time()
        phases = [GatePhase.VALIDATE]
        initial = self._validator.validate_all(source, css, js)
        self._gate_logger.log_validation(
            initial,
            markup_length=len(source),
            duration_ms=(time.time() - start_time) * 1000,
        )

        final = initial
        output = source
        fix_result = None

        if auto_fix and (always_fix or not initial.passed):
            phases.append(GatePhase.AUTOFIX)
            fix_result = self._fixer.auto_fix(source, initial)
            self._gate_logger.log_autofix(fix_result)

            if fix_result.changed:
                phases.append(GatePhase.REVALIDATE)
                candidate = self._validator.validate_all(fix_result.fixed, css, js)
                if candidate.score < initial.score:
                    logger.warning(
                        f"Score degraded after auto-fix "
                        f"({initial.score} -> {candidate.score}), rolling back"
                    )
                    phases.append(GatePhase.ROLLBACK)
                else:
                    final = candidate
                    output = fix_result.fixed

        phases.append(GatePhase.COMPLETE)
        report = GateReport(
            original_html=source,
            html=output,
            initial=initial,
            final=final,
            fix=fix_result,
            phases=phases,
            duration_ms=(time.time() - start_time) * 1000,
        )
        self._gate_logger.log_gate(report)
        return report

    # =========================================================================
    # PROJECT REMEDIATION
    # =========================================================================

    def remediate_file(self, path_name: str, content: str) -> Optional[RemediationResult]:
        """
        Run the gate on one project file, always attempting repairs.

        Pages (.html) use the full catalog; components (.tsx/.jsx) skip the
        page-level rules, whose fixes would corrupt a component module.

        Args:
            path_name: File path (only the extension matters)
            content: File content

        Returns:
            RemediationResult, or None for unsupported file types

        Raises:
            ValueError: If the content exceeds MAX_MARKUP_CHARS
        """
        extension = PurePosixPath(path_name).suffix.lower()
        if extension in PAGE_EXTENSIONS:
            pipeline = self
        elif extension in COMPONENT_EXTENSIONS:
            pipeline = self._get_component_pipeline()
        else:
            logger.debug(f"Skipping {path_name}: unsupported file type")
            return None

        try:
            report = pipeline.run(content, always_fix=True)
        except ValueError as e:
            self._gate_logger.log_error(f"remediate {path_name}", e)
            raise

        persist = report.changed
        logger.info(
            f"Remediated {path_name}: score {report.initial.score} -> "
            f"{report.final.score}, persist={persist}"
        )
        return RemediationResult(path=path_name, report=report, persist=persist)

    def _get_component_pipeline(self) -> "QualityGatePipeline":
        if self._component_pipeline is None:
            rule_ids = [
                rule_id for rule_id in self._catalog.rule_ids
                if rule_id not in DOCUMENT_LEVEL_RULE_IDS
            ]
            self._component_pipeline = QualityGatePipeline(
                settings=self._settings,
                catalog=self._catalog.subset(rule_ids),
                scoring_engine=self._scoring,
                gate_logger=self._gate_logger,
            )
        return self._component_pipeline

    def __repr__(self) -> str:
        return f"QualityGatePipeline({self._catalog!r})"
