"""
Fix Transforms - Deterministic text repairs, one per fixable rule.

Every transform has the shape `(html) -> FixOutcome` once its
configuration is bound, and follows the same steps:
1. Build a fresh DocumentModel from the input
2. Ask the rule's own check whether there is anything to do
3. Splice new text into the exact byte ranges found by the model

Nothing is re-serialized: bytes outside the spliced ranges are returned
exactly as they came in, so a transform cannot reformat or reorder the
author's markup. A transform that finds nothing to do, or no safe place
to act, returns the input unchanged with applied=False.
"""

import logging
from typing import List, Tuple

from ..analyzers.document_model import DocumentModel
from ..analyzers.fold_classifier import AboveFoldClassifier
from ..contracts.checks import CheckInput
from ..contracts.fixes import FixOutcome
from ..validators.structure_checks import (
    check_charset,
    check_doctype,
    check_html_lang,
    check_viewport,
)
from ..validators.security_checks import (
    REQUIRED_REL_TOKENS,
    missing_rel_tokens,
    unsafe_blank_links,
)


logger = logging.getLogger(__name__)

DOCTYPE = "<!DOCTYPE html>"
CHARSET_META = '<meta charset="UTF-8">'
VIEWPORT_META = '<meta name="viewport" content="width=device-width, initial-scale=1.0">'

BOM = "\ufeff"

# (start, end, replacement)
Edit = Tuple[int, int, str]


# =============================================================================
# DOCUMENT-LEVEL FIXES
# =============================================================================

def fix_doctype(html: str) -> FixOutcome:
    """Prepend <!DOCTYPE html> (after a leading BOM, if any)."""
    doc = DocumentModel(html)
    if doc.is_blank or not check_doctype(CheckInput(doc)):
        return FixOutcome.unchanged(html)

    at = len(BOM) if html.startswith(BOM) else 0
    return FixOutcome(
        html=_apply(html, [(at, at, DOCTYPE + "\n")]),
        applied=True,
        description="Added <!DOCTYPE html> declaration",
    )


def fix_charset(html: str) -> FixOutcome:
    """
    Make the document declare UTF-8.

    Rewrites the first <meta charset> when it names another encoding;
    otherwise inserts a charset meta right after <head>, creating the
    head after <html> when there is none.
    """
    doc = DocumentModel(html)
    if not check_charset(CheckInput(doc)):
        return FixOutcome.unchanged(html)

    declared = [m for m in doc.find_all("meta") if m.has("charset")]
    if declared:
        meta = declared[0]
        span = meta.attr_spans.get("charset")
        if not meta.located or span is None:
            logger.debug("Charset meta could not be located, leaving it")
            return FixOutcome.unchanged(html)
        if span.has_value:
            value = '"UTF-8"' if not span.quote else "UTF-8"
            edit = (span.value_start, span.value_end, value)
        else:
            edit = (span.name_end, span.name_end, '="UTF-8"')
        return FixOutcome(
            html=_apply(html, [edit]),
            applied=True,
            description="Changed document charset to UTF-8",
        )

    head = doc.head
    if head is not None and head.located:
        return FixOutcome(
            html=_apply(html, [(head.end, head.end, "\n" + CHARSET_META)]),
            applied=True,
            description='Added <meta charset="UTF-8">',
        )

    root = doc.html_tag
    if head is None and root is not None and root.located:
        block = f"\n<head>\n{CHARSET_META}\n</head>"
        return FixOutcome(
            html=_apply(html, [(root.end, root.end, block)]),
            applied=True,
            description='Added <head> with <meta charset="UTF-8">',
        )

    return FixOutcome.unchanged(html)


def fix_viewport(html: str) -> FixOutcome:
    """Insert the responsive viewport meta after the charset meta or <head>."""
    doc = DocumentModel(html)
    if not check_viewport(CheckInput(doc)):
        return FixOutcome.unchanged(html)

    anchor = next(
        (m for m in doc.find_all("meta") if m.has("charset") and m.located),
        None,
    )
    if anchor is None and doc.head is not None and doc.head.located:
        anchor = doc.head
    if anchor is None:
        return FixOutcome.unchanged(html)

    return FixOutcome(
        html=_apply(html, [(anchor.end, anchor.end, "\n" + VIEWPORT_META)]),
        applied=True,
        description="Added viewport meta tag",
    )


def fix_html_lang(html: str, lang: str = "en") -> FixOutcome:
    """Add lang to <html>, or fill in a blank lang value."""
    doc = DocumentModel(html)
    root = doc.html_tag
    if root is None or not root.located or not check_html_lang(CheckInput(doc)):
        return FixOutcome.unchanged(html)

    span = root.attr_spans.get("lang")
    if span is None:
        edit = (root.name_end, root.name_end, f' lang="{lang}"')
    elif span.has_value:
        value = lang if span.quote else f'"{lang}"'
        edit = (span.value_start, span.value_end, value)
    else:
        edit = (span.name_end, span.name_end, f'="{lang}"')

    return FixOutcome(
        html=_apply(html, [edit]),
        applied=True,
        description=f'Added lang="{lang}" to <html>',
    )


# =============================================================================
# ELEMENT-LEVEL FIXES
# =============================================================================

def fix_external_link_rel(html: str) -> FixOutcome:
    """Complete rel="noopener noreferrer" on external target=_blank links."""
    doc = DocumentModel(html)
    links = unsafe_blank_links(doc)
    if not links:
        return FixOutcome.unchanged(html)

    edits: List[Edit] = []
    for link in links:
        span = link.attr_spans.get("rel")
        if span is None:
            rel = " ".join(REQUIRED_REL_TOKENS)
            edits.append((link.name_end, link.name_end, f' rel="{rel}"'))
        elif span.has_value:
            current = html[span.value_start:span.value_end].strip()
            rel = " ".join([current] + missing_rel_tokens(current)) if current \
                else " ".join(REQUIRED_REL_TOKENS)
            value = rel if span.quote else f'"{rel}"'
            edits.append((span.value_start, span.value_end, value))
        else:
            rel = " ".join(REQUIRED_REL_TOKENS)
            edits.append((span.name_end, span.name_end, f'="{rel}"'))

    return FixOutcome(
        html=_apply(html, edits),
        applied=True,
        description=f'Added rel="noopener noreferrer" to {len(links)} external link(s)',
    )


def fix_img_lazy_loading(html: str, classifier: AboveFoldClassifier) -> FixOutcome:
    """
    Add loading="lazy" to below-the-fold images.

    Must run after every other transform: the fold classifier's byte
    heuristic depends on final offsets.
    """
    doc = DocumentModel(html)
    candidates = classifier.lazy_candidates(doc)
    if not candidates:
        return FixOutcome.unchanged(html)

    edits = [(img.name_end, img.name_end, ' loading="lazy"') for img in candidates]
    return FixOutcome(
        html=_apply(html, edits),
        applied=True,
        description=f'Added loading="lazy" to {len(candidates)} below-the-fold image(s)',
    )


# =============================================================================
# HELPERS
# =============================================================================

def _apply(source: str, edits: List[Edit]) -> str:
    """Apply non-overlapping edits in a single left-to-right pass."""
    pieces = []
    cursor = 0
    for start, end, replacement in sorted(edits, key=lambda e: e[0]):
        pieces.append(source[cursor:start])
        pieces.append(replacement)
        cursor = end
    pieces.append(source[cursor:])
    return "".join(pieces)
