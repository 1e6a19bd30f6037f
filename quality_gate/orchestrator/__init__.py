"""
Orchestrator - Validate -> [AutoFix -> Validate] -> Report.

Usage:
    from quality_gate.orchestrator import QualityGatePipeline

    report = QualityGatePipeline().run(html)
    print(report.describe())
"""

from .contracts import GatePhase, GateReport, RemediationResult
from .pipeline import QualityGatePipeline

__all__ = [
    "GatePhase",
    "GateReport",
    "RemediationResult",
    "QualityGatePipeline",
]
