"""
Scoring - Findings to score, grade and pass/fail.
"""

from .scoring_engine import (
    DEFAULT_GRADE_THRESHOLDS,
    DEFAULT_WEIGHTS,
    ScoringEngine,
    ScoringPolicy,
)

__all__ = [
    "DEFAULT_GRADE_THRESHOLDS",
    "DEFAULT_WEIGHTS",
    "ScoringEngine",
    "ScoringPolicy",
]
