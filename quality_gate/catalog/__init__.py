"""
Catalog - Rule definitions and the built-in rule set.

Usage:
    from quality_gate.catalog import build_default_catalog

    catalog = build_default_catalog(settings)
    print(catalog.describe())
"""

from .rule_spec import CheckFn, FixTransform, RuleSpec
from .rule_catalog import INTERNAL_RULE_ERROR, INTERNAL_RULE_ERROR_ID, RuleCatalog
from .default_catalog import build_default_catalog

__all__ = [
    "CheckFn",
    "FixTransform",
    "RuleSpec",
    "INTERNAL_RULE_ERROR",
    "INTERNAL_RULE_ERROR_ID",
    "RuleCatalog",
    "build_default_catalog",
]
