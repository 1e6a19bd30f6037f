"""
Validators - Rule checks and the engine that runs them.

Check modules (one per category):
- structure_checks: skeleton, headings, CSS/JS syntax
- seo_checks: description and Open Graph metadata
- accessibility_checks: alt text, labels, link/button names, contrast, focus
- performance_checks: lazy images, blocking and oversized scripts
- security_checks: link rel, inline handlers, HTML sinks, eval, secrets

Usage:
    from quality_gate.validators import ValidationEngine

    engine = ValidationEngine(catalog)
    result = engine.validate_all(html)
"""

from .validation_engine import ValidationEngine, is_code_complete

__all__ = [
    "ValidationEngine",
    "is_code_complete",
]
