"""
Gate Logger - Structured logging for quality gate runs.

This module configures the `quality_gate` logger (every module logger of
the package propagates to it) and provides structured events for:
- Validation runs (score, grade, finding counts)
- Auto-fix runs (applied fixes, remaining issues)
- Full gate runs (phases, before/after scores, duration)

Log Format:
==========
[timestamp] LEVEL [logger name] Event: {json payload}

The markup itself is never logged, only its length.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TYPE_CHECKING

from ..contracts.findings import ValidationResult
from ..contracts.fixes import AutoFixResult
from ..core.config import settings

if TYPE_CHECKING:
    from ..orchestrator.contracts import GateReport


# Configure the package logger
logger = logging.getLogger("quality_gate")
logger.setLevel(settings.LOG_LEVEL.upper())

# Create console handler if not exists
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


class GateLogger:
    """
    Structured logger for quality gate events.

    Usage:
        gate_logger = GateLogger()
        gate_logger.log_validation(result, markup_length=len(html))
        gate_logger.log_autofix(fix_result)
    """

    def __init__(self, name: str = "quality_gate.gate"):
        self._logger = logging.getLogger(name)

    def log_validation(
        self,
        result: ValidationResult,
        markup_length: int = 0,
        duration_ms: float = 0.0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log a validation run.

        Args:
            result: Validation result
            markup_length: Size of the validated markup
            duration_ms: Time spent validating
            metadata: Additional metadata (e.g. file path)
        """
        log_data = {
            "event": "validation",
            "markup_length": markup_length,
            "summary": result.summary,
            "critical": result.has_critical,
            "rule_ids": sorted(result.rule_ids()),
            "duration_ms": round(duration_ms, 2),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if metadata:
            log_data["metadata"] = metadata

        level = logging.INFO if result.passed else logging.WARNING
        self._logger.log(level, f"Validation: {json.dumps(log_data)}")

    def log_autofix(
        self,
        result: AutoFixResult,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log an auto-fix run."""
        log_data = {
            "event": "autofix",
            "applied": len(result.applied_fixes),
            "resolved_rule_ids": list(result.resolved_rule_ids),
            "remaining_issues": result.remaining_issues,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if metadata:
            log_data["metadata"] = metadata

        self._logger.info(f"AutoFix: {json.dumps(log_data)}")

    def log_gate(
        self,
        report: "GateReport",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the outcome of a full gate run."""
        log_data = {
            "event": "gate",
            "phases": [phase.value for phase in report.phases],
            "initial_score": report.initial.score,
            "final_score": report.final.score,
            "grade": report.final.grade,
            "passed": report.passed,
            "improved": report.improved,
            "duration_ms": round(report.duration_ms, 2),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if metadata:
            log_data["metadata"] = metadata

        level = logging.INFO if report.passed else logging.WARNING
        self._logger.log(level, f"Gate: {json.dumps(log_data)}")

    def log_error(self, operation: str, error: Exception) -> None:
        """Log an unexpected failure around a gate run."""
        log_data = {
            "event": "error",
            "operation": operation,
            "error_type": type(error).__name__,
            "error": str(error),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self._logger.error(f"Error: {json.dumps(log_data)}")


# Global gate logger instance
gate_logger = GateLogger()
