"""
ScoringEngine - Reduce findings to a score, grade and pass/fail.

Scoring is deliberately simple so it can be reproduced by hand:
1. Start at 100
2. Subtract the weight of every finding (no deduplication)
3. Clamp to [0, 100]
4. Grade by threshold (A >= 90, B >= 80, C >= 70, D >= 60, else F)
5. Pass when score >= pass threshold and no error-tier critical finding

Usage:
    engine = ScoringEngine()
    card = engine.score(findings)
    print(card.score, card.grade, card.passed)
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from ..contracts.findings import Finding, ScoreCard
from ..contracts.severity import Severity, SeverityTier


logger = logging.getLogger(__name__)


MAX_SCORE = 100

DEFAULT_WEIGHTS: Mapping[Tuple[SeverityTier, Severity], int] = MappingProxyType({
    (SeverityTier.ERROR, Severity.CRITICAL): 15,
    (SeverityTier.ERROR, Severity.HIGH): 10,
    (SeverityTier.ERROR, Severity.MEDIUM): 5,
    (SeverityTier.ERROR, Severity.LOW): 2,
    (SeverityTier.WARNING, Severity.CRITICAL): 10,
    (SeverityTier.WARNING, Severity.HIGH): 6,
    (SeverityTier.WARNING, Severity.MEDIUM): 4,
    (SeverityTier.WARNING, Severity.LOW): 2,
    (SeverityTier.INFO, Severity.CRITICAL): 5,
    (SeverityTier.INFO, Severity.HIGH): 3,
    (SeverityTier.INFO, Severity.MEDIUM): 2,
    (SeverityTier.INFO, Severity.LOW): 1,
})

DEFAULT_GRADE_THRESHOLDS: Tuple[Tuple[str, int], ...] = (
    ("A", 90),
    ("B", 80),
    ("C", 70),
    ("D", 60),
)

FAILING_GRADE = "F"


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Weights and thresholds used to score findings.

    Construction fails unless the weight table covers every
    (tier, severity) pair with a non-negative weight, which keeps the
    score monotonic in the number of findings.
    """

    weights: Mapping[Tuple[SeverityTier, Severity], int] = field(
        default_factory=lambda: DEFAULT_WEIGHTS
    )
    grade_thresholds: Tuple[Tuple[str, int], ...] = DEFAULT_GRADE_THRESHOLDS
    pass_threshold: int = 70

    def __post_init__(self):
        missing = [
            f"{tier.value}/{severity.value}"
            for tier in SeverityTier
            for severity in Severity
            if (tier, severity) not in self.weights
        ]
        if missing:
            raise ValueError(f"Weight table is missing: {', '.join(missing)}")

        negative = [
            f"{tier.value}/{severity.value}"
            for (tier, severity), weight in self.weights.items()
            if weight < 0
        ]
        if negative:
            raise ValueError(f"Weights must be >= 0: {', '.join(negative)}")

        minimums = [minimum for _, minimum in self.grade_thresholds]
        if minimums != sorted(minimums, reverse=True):
            raise ValueError("Grade thresholds must be in descending order")

        if not 0 <= self.pass_threshold <= MAX_SCORE:
            raise ValueError(f"pass_threshold must be within [0, {MAX_SCORE}]")

        # Freeze a caller-supplied dict so the policy stays shareable
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    @classmethod
    def from_settings(cls, settings) -> "ScoringPolicy":
        return cls(pass_threshold=settings.PASS_THRESHOLD)


class ScoringEngine:
    """
    Apply a ScoringPolicy to findings.

    Stateless; one instance can be shared by every validation.
    """

    def __init__(self, policy: Optional[ScoringPolicy] = None):
        self._policy = policy or ScoringPolicy()

    @property
    def policy(self) -> ScoringPolicy:
        return self._policy

    def weight_for(self, tier: SeverityTier, severity: Severity) -> int:
        """Points deducted for one finding of the given tier and severity."""
        return self._policy.weights[(tier, severity)]

    def grade_for(self, score: int) -> str:
        for grade, minimum in self._policy.grade_thresholds:
            if score >= minimum:
                return grade
        return FAILING_GRADE

    def score(self, findings: Iterable[Finding]) -> ScoreCard:
        """
        Score a list of findings.

        Args:
            findings: Findings to deduct (each one counts)

        Returns:
            ScoreCard with score in [0, 100], grade and passed flag
        """
        deducted = 0
        critical = 0
        for finding in findings:
            deducted += finding.weight
            if finding.is_critical_error:
                critical += 1

        score = max(0, min(MAX_SCORE, MAX_SCORE - deducted))
        passed = score >= self._policy.pass_threshold and critical == 0
        card = ScoreCard(score=score, grade=self.grade_for(score), passed=passed)

        logger.debug(
            f"Scored: -{deducted} points, {critical} critical -> "
            f"{card.score} ({card.grade}, {'passed' if passed else 'failed'})"
        )
        return card
