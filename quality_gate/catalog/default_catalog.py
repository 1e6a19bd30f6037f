"""
Default Catalog - The built-in rule set.

Rule ids are stable: new rules get new ids, and an id is never reused for
a different check. Declared order below is the order findings are
reported in.

Configuration (fold heuristics, default language, size limits) is bound
into checks and transforms with functools.partial when the catalog is
built, so rules never read global settings at run time.

Usage:
    from quality_gate.core.config import settings
    catalog = build_default_catalog(settings)
"""

import logging
from functools import partial
from typing import List, Optional

from ..analyzers.fold_classifier import AboveFoldClassifier
from ..contracts.severity import Category, Severity, SeverityTier
from ..fixers.transforms import (
    fix_charset,
    fix_doctype,
    fix_external_link_rel,
    fix_html_lang,
    fix_img_lazy_loading,
    fix_viewport,
)
from ..validators import (
    accessibility_checks as a11y,
    performance_checks as perf,
    security_checks as sec,
    seo_checks as seo,
    structure_checks as struct,
)
from .rule_catalog import INTERNAL_RULE_ERROR, RuleCatalog
from .rule_spec import RuleSpec


logger = logging.getLogger(__name__)


def _structure_rules(settings) -> List[RuleSpec]:
    S = Category.STRUCTURE
    return [
        RuleSpec(
            "structure.non-empty", S, SeverityTier.ERROR, Severity.CRITICAL,
            title="Empty markup",
            suggestion="Generate the page content; nothing was produced.",
            check=struct.check_non_empty,
        ),
        RuleSpec(
            "structure.doctype", S, SeverityTier.ERROR, Severity.HIGH,
            title="Missing DOCTYPE",
            suggestion="Add <!DOCTYPE html> at the very beginning of the document.",
            check=struct.check_doctype,
            fix=fix_doctype,
            fix_priority=10,
        ),
        RuleSpec(
            "structure.charset", S, SeverityTier.WARNING, Severity.MEDIUM,
            title="Missing or non-UTF-8 charset",
            suggestion='Add <meta charset="UTF-8"> as the first element of <head>.',
            check=struct.check_charset,
            fix=fix_charset,
            fix_priority=20,
        ),
        RuleSpec(
            "structure.viewport", S, SeverityTier.ERROR, Severity.HIGH,
            title="Missing viewport meta",
            suggestion='Add <meta name="viewport" content="width=device-width, initial-scale=1.0">.',
            check=struct.check_viewport,
            fix=fix_viewport,
            fix_priority=30,
        ),
        RuleSpec(
            "structure.html-lang", S, SeverityTier.WARNING, Severity.MEDIUM,
            title="Missing document language",
            suggestion=f'Add lang="{settings.DEFAULT_LANG}" (or the page language) to <html>.',
            check=struct.check_html_lang,
            fix=partial(fix_html_lang, lang=settings.DEFAULT_LANG),
            fix_priority=40,
        ),
        RuleSpec(
            "structure.body", S, SeverityTier.ERROR, Severity.HIGH,
            title="Missing body",
            suggestion="Wrap the visible content in a <body> element.",
            check=struct.check_body,
        ),
        RuleSpec(
            "structure.truncated", S, SeverityTier.ERROR, Severity.HIGH,
            title="Truncated document",
            suggestion="The output was cut off; regenerate or close </body></html>.",
            check=struct.check_truncated,
        ),
        RuleSpec(
            "structure.title", S, SeverityTier.ERROR, Severity.HIGH,
            title="Missing title",
            suggestion="Add a descriptive <title> inside <head>.",
            check=struct.check_title,
        ),
        RuleSpec(
            "structure.h1-missing", S, SeverityTier.ERROR, Severity.HIGH,
            title="Missing h1",
            suggestion="Add one <h1> describing the page.",
            check=struct.check_h1_missing,
        ),
        RuleSpec(
            "structure.h1-multiple", S, SeverityTier.WARNING, Severity.MEDIUM,
            title="Multiple h1",
            suggestion="Keep a single <h1> and demote the others to <h2>.",
            check=struct.check_h1_multiple,
        ),
        RuleSpec(
            "structure.heading-order", S, SeverityTier.WARNING, Severity.MEDIUM,
            title="Skipped heading level",
            suggestion="Use heading levels in sequence (h1, h2, h3) without gaps.",
            check=struct.check_heading_order,
        ),
        RuleSpec(
            "structure.css-syntax", S, SeverityTier.ERROR, Severity.CRITICAL,
            title="CSS syntax error",
            suggestion="Balance every { with a matching } in the stylesheet.",
            check=struct.check_css_syntax,
        ),
        RuleSpec(
            "structure.js-syntax", S, SeverityTier.ERROR, Severity.CRITICAL,
            title="JavaScript syntax error",
            suggestion="Balance parentheses, brackets and braces in the script.",
            check=struct.check_js_syntax,
        ),
    ]


def _seo_rules(settings) -> List[RuleSpec]:
    return [
        RuleSpec(
            "seo.meta-description", Category.SEO, SeverityTier.WARNING, Severity.MEDIUM,
            title="Missing meta description",
            suggestion='Add <meta name="description" content="..."> (150-160 characters).',
            check=seo.check_meta_description,
        ),
        RuleSpec(
            "seo.open-graph", Category.SEO, SeverityTier.INFO, Severity.LOW,
            title="Missing Open Graph tags",
            suggestion="Add og:title, og:description and og:image meta tags for link previews.",
            check=seo.check_open_graph,
        ),
    ]


def _accessibility_rules(settings) -> List[RuleSpec]:
    A = Category.ACCESSIBILITY
    return [
        RuleSpec(
            "accessibility.img-alt", A, SeverityTier.ERROR, Severity.HIGH,
            title="Images without alt text",
            suggestion='Add alt text to every <img> (alt="" for decorative images).',
            check=a11y.check_img_alt,
        ),
        RuleSpec(
            "accessibility.input-label", A, SeverityTier.WARNING, Severity.MEDIUM,
            title="Unlabeled form control",
            suggestion="Associate a <label for> or add aria-label to the control.",
            check=a11y.check_input_label,
        ),
        RuleSpec(
            "accessibility.generic-link-text", A, SeverityTier.WARNING, Severity.MEDIUM,
            title="Generic link text",
            suggestion='Describe the destination ("Read the pricing guide"), not "click here".',
            check=a11y.check_generic_link_text,
        ),
        RuleSpec(
            "accessibility.button-name", A, SeverityTier.WARNING, Severity.MEDIUM,
            title="Button without accessible name",
            suggestion='Give buttons visible text or aria-label; add tabindex="0" to role="button" elements.',
            check=a11y.check_button_name,
        ),
        RuleSpec(
            "accessibility.color-contrast", A, SeverityTier.WARNING, Severity.LOW,
            title="Low color contrast",
            suggestion="Use text/background colors with a contrast ratio of at least 4.5:1.",
            check=a11y.check_color_contrast,
        ),
        RuleSpec(
            "accessibility.focus-styles", A, SeverityTier.WARNING, Severity.LOW,
            title="No focus styles",
            suggestion="Add :focus or :focus-visible styles so keyboard users can see focus.",
            check=a11y.check_focus_styles,
        ),
        RuleSpec(
            "accessibility.main-landmark", A, SeverityTier.INFO, Severity.LOW,
            title="Missing main landmark",
            suggestion="Wrap the primary content in <main> so assistive tech can skip to it.",
            check=a11y.check_main_landmark,
        ),
        RuleSpec(
            "accessibility.responsive-media", A, SeverityTier.INFO, Severity.LOW,
            title="No media queries",
            suggestion="Add @media breakpoints so the layout adapts to small screens.",
            check=a11y.check_responsive_media,
        ),
        RuleSpec(
            "accessibility.reduced-motion", A, SeverityTier.INFO, Severity.LOW,
            title="Motion without reduced-motion query",
            suggestion="Wrap animations in @media (prefers-reduced-motion: no-preference) or disable them under reduce.",
            check=a11y.check_reduced_motion,
        ),
    ]


def _performance_rules(settings, classifier: AboveFoldClassifier) -> List[RuleSpec]:
    P = Category.PERFORMANCE
    return [
        RuleSpec(
            "performance.img-lazy-loading", P, SeverityTier.INFO, Severity.LOW,
            title="Images not lazy-loaded",
            suggestion='Add loading="lazy" to images below the fold.',
            check=partial(perf.check_img_lazy_loading, classifier=classifier),
            fix=partial(fix_img_lazy_loading, classifier=classifier),
            fix_priority=60,
        ),
        RuleSpec(
            "performance.blocking-scripts", P, SeverityTier.WARNING, Severity.MEDIUM,
            title="Blocking or duplicate scripts",
            suggestion="Load each script once and add defer or async to scripts in <head>.",
            check=perf.check_blocking_scripts,
        ),
        RuleSpec(
            "performance.large-inline-script", P, SeverityTier.WARNING, Severity.LOW,
            title="Large inline script",
            suggestion="Move large scripts to an external file so they can be cached.",
            check=partial(
                perf.check_large_inline_script,
                max_chars=settings.LARGE_INLINE_SCRIPT_CHARS,
            ),
        ),
    ]


def _security_rules(settings) -> List[RuleSpec]:
    X = Category.SECURITY
    return [
        RuleSpec(
            "security.external-link-rel", X, SeverityTier.WARNING, Severity.LOW,
            title="Unsafe target=_blank link",
            suggestion='Add rel="noopener noreferrer" to external links opening a new tab.',
            check=sec.check_external_link_rel,
            fix=fix_external_link_rel,
            fix_priority=50,
        ),
        RuleSpec(
            "security.inline-event-handler", X, SeverityTier.ERROR, Severity.CRITICAL,
            title="Inline event handler",
            suggestion="Attach handlers with addEventListener instead of on* attributes.",
            check=sec.check_inline_event_handler,
        ),
        RuleSpec(
            "security.html-injection-sink", X, SeverityTier.WARNING, Severity.HIGH,
            title="HTML injection sink",
            suggestion="Use textContent or DOM APIs, or sanitize before writing HTML.",
            check=sec.check_html_injection_sink,
        ),
        RuleSpec(
            "security.dynamic-code-eval", X, SeverityTier.ERROR, Severity.CRITICAL,
            title="Dynamic code execution",
            suggestion="Remove eval()/new Function(); parse data with JSON.parse instead.",
            check=sec.check_dynamic_code_eval,
        ),
        RuleSpec(
            "security.hardcoded-secret", X, SeverityTier.ERROR, Severity.CRITICAL,
            title="Hardcoded secret",
            suggestion="Move secrets to server-side environment variables.",
            check=sec.check_hardcoded_secret,
        ),
    ]


def build_default_catalog(settings=None, classifier: Optional[AboveFoldClassifier] = None) -> RuleCatalog:
    """
    Build the built-in catalog.

    Args:
        settings: Settings instance (module settings if None)
        classifier: Fold classifier override (built from settings if None)

    Returns:
        Immutable RuleCatalog in declared order
    """
    if settings is None:
        from ..core.config import settings as default_settings
        settings = default_settings
    classifier = classifier or AboveFoldClassifier.from_settings(settings)

    catalog = RuleCatalog([
        *_structure_rules(settings),
        *_seo_rules(settings),
        *_accessibility_rules(settings),
        *_performance_rules(settings, classifier),
        *_security_rules(settings),
        INTERNAL_RULE_ERROR,
    ])
    logger.debug(f"Built default catalog: {catalog!r}, {classifier!r}")
    return catalog
