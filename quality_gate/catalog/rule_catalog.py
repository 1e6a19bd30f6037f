"""
RuleCatalog - Immutable, ordered registry of rules.

Declared order is significant: findings are reported in catalog order, and
fixable rules are applied in fix_priority order (ties keep declared order).

Usage:
    catalog = RuleCatalog([rule_a, rule_b])
    catalog.get("structure.doctype")
    for rule in catalog.fixable_rules():
        ...
"""

from types import MappingProxyType
from typing import Iterable, Iterator, Optional, Tuple

from ..contracts.severity import Category, Severity, SeverityTier
from .rule_spec import RuleSpec


INTERNAL_RULE_ERROR_ID = "internal.rule-error"

# Synthetic rule reported when a check raises; it has no check of its own
INTERNAL_RULE_ERROR = RuleSpec(
    rule_id=INTERNAL_RULE_ERROR_ID,
    category=Category.INTERNAL,
    tier=SeverityTier.WARNING,
    severity=Severity.MEDIUM,
    title="Rule failed to run",
    suggestion="Report the failing rule; the document was not fully checked.",
)


class RuleCatalog:
    """
    Ordered collection of RuleSpecs.

    The catalog cannot be modified after construction; use subset() to
    derive a smaller catalog.
    """

    def __init__(self, rules: Iterable[RuleSpec]):
        """
        Build the catalog.

        Args:
            rules: Rules in declared order

        Raises:
            ValueError: If two rules share an id
        """
        ordered = tuple(rules)
        index = {}
        for position, rule in enumerate(ordered):
            if rule.rule_id in index:
                raise ValueError(f"Duplicate rule id: {rule.rule_id}")
            index[rule.rule_id] = position
        self._rules: Tuple[RuleSpec, ...] = ordered
        self._index = MappingProxyType(index)

    @property
    def rules(self) -> Tuple[RuleSpec, ...]:
        return self._rules

    @property
    def rule_ids(self) -> Tuple[str, ...]:
        return tuple(rule.rule_id for rule in self._rules)

    def get(self, rule_id: str) -> Optional[RuleSpec]:
        """Get a rule by id, or None if unknown."""
        position = self._index.get(rule_id)
        return None if position is None else self._rules[position]

    def index_of(self, rule_id: str) -> int:
        """
        Get the declared position of a rule.

        Raises:
            KeyError: If the id is not in the catalog
        """
        return self._index[rule_id]

    def runnable_rules(self) -> Tuple[RuleSpec, ...]:
        """Rules with a check function, in declared order."""
        return tuple(rule for rule in self._rules if rule.runnable)

    def fixable_rules(self) -> Tuple[RuleSpec, ...]:
        """Rules with a fix transform, sorted by fix_priority."""
        fixable = [rule for rule in self._rules if rule.fixable]
        return tuple(sorted(fixable, key=lambda r: (r.fix_priority, self._index[r.rule_id])))

    def by_category(self, category: Category) -> Tuple[RuleSpec, ...]:
        return tuple(rule for rule in self._rules if rule.category is category)

    def subset(self, rule_ids: Iterable[str]) -> "RuleCatalog":
        """
        Derive a catalog holding only the given rules (declared order kept).

        The internal rule-error rule is always carried over so faults in the
        subset can still be reported.

        Raises:
            KeyError: If an id is not in the catalog
        """
        wanted = set(rule_ids)
        unknown = wanted - set(self._index)
        if unknown:
            raise KeyError(f"Unknown rule id(s): {', '.join(sorted(unknown))}")
        wanted.add(INTERNAL_RULE_ERROR_ID)
        return RuleCatalog(rule for rule in self._rules if rule.rule_id in wanted)

    def describe(self) -> str:
        lines = [f"RuleCatalog: {len(self._rules)} rules"]
        for rule in self._rules:
            lines.append(f"  - {rule.describe()}")
        return "\n".join(lines)

    def __iter__(self) -> Iterator[RuleSpec]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._index

    def __repr__(self) -> str:
        return f"RuleCatalog({len(self._rules)} rules, {len(self.fixable_rules())} fixable)"
