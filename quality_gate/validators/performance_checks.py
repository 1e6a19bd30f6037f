"""
Performance Checks - Loading behaviour of images and scripts.

The lazy-loading check shares its candidate list with the lazy-loading
fix through AboveFoldClassifier, so the fix resolves exactly what the
check reports.
"""

from collections import OrderedDict
from typing import List

from ..analyzers.fold_classifier import AboveFoldClassifier
from ..contracts.checks import CheckInput, Violation


def check_img_lazy_loading(ctx: CheckInput, classifier: AboveFoldClassifier) -> List[Violation]:
    candidates = classifier.lazy_candidates(ctx.doc)
    if not candidates:
        return []
    return [Violation(
        f'{len(candidates)} below-the-fold image(s) missing loading="lazy"',
        line=ctx.doc.line_of_record(candidates[0]),
    )]


def check_blocking_scripts(ctx: CheckInput) -> List[Violation]:
    """
    Flag external scripts loaded more than once, and external scripts in
    <head> that block rendering (no async, defer or type="module").
    """
    doc = ctx.doc
    violations = []
    external = [s for s in doc.find_all("script") if (s.get("src") or "").strip()]

    seen: "OrderedDict[str, list]" = OrderedDict()
    for script in external:
        seen.setdefault(script.get("src").strip(), []).append(script)
    for src, records in seen.items():
        if len(records) > 1:
            violations.append(Violation(
                f'External script "{src}" is loaded {len(records)} times',
                line=doc.line_of_record(records[1]),
            ))

    for script in external:
        if not doc.in_head(script):
            continue
        if script.has("async") or script.has("defer"):
            continue
        if (script.get("type") or "").strip().lower() == "module":
            continue
        violations.append(Violation(
            f'Render-blocking script in <head>: "{script.get("src").strip()}"',
            line=doc.line_of_record(script),
        ))
    return violations


def check_large_inline_script(ctx: CheckInput, max_chars: int) -> List[Violation]:
    violations = []
    for block in ctx.scripts:
        if block.offset is None:
            continue
        size = len(block.text)
        if size > max_chars:
            violations.append(Violation(
                f"Large {block.label} ({size} characters, limit {max_chars})",
                line=ctx.line_in(block, 0),
            ))
    return violations
