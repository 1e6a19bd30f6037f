"""
Fixers - Deterministic repairs for the fixable rules.

Transforms (applied in this order by the default catalog):
- fix_doctype: prepend <!DOCTYPE html>
- fix_charset: declare UTF-8
- fix_viewport: add the responsive viewport meta
- fix_html_lang: add lang to <html>
- fix_external_link_rel: add rel="noopener noreferrer"
- fix_img_lazy_loading: lazy-load below-the-fold images

Usage:
    from quality_gate.fixers import AutoFixEngine

    engine = AutoFixEngine(catalog)
    result = engine.auto_fix(html, validation_result)
"""

from .auto_fix_engine import AutoFixEngine
from .transforms import (
    fix_charset,
    fix_doctype,
    fix_external_link_rel,
    fix_html_lang,
    fix_img_lazy_loading,
    fix_viewport,
)

__all__ = [
    "AutoFixEngine",
    "fix_charset",
    "fix_doctype",
    "fix_external_link_rel",
    "fix_html_lang",
    "fix_img_lazy_loading",
    "fix_viewport",
]
