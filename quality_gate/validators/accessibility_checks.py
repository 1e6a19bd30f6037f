"""
Accessibility Checks - Heuristic approximations of common a11y defects.

These are not a WCAG audit. Each check looks for one well-known pattern
that screen reader and keyboard users trip over:
- images without alt text
- form controls without an accessible label
- links whose text says nothing out of context ("click here")
- buttons without a name, role="button" elements without focus
- low contrast between inline color and background
- stylesheets with no focus indication
- pages without a <main> landmark, stylesheets without responsive or
  reduced-motion rules
"""

import re
from typing import List

from ..contracts.checks import CheckInput, Violation
from .source_scan import contrast_ratio, parse_color, parse_inline_style


MIN_CONTRAST_RATIO = 4.5

GENERIC_LINK_TEXTS = frozenset({
    "click here",
    "click",
    "here",
    "read more",
    "more",
    "learn more",
    "this link",
    "link",
})

# Input types that either render no control or carry their own label
_UNLABELED_INPUT_TYPES = frozenset({"hidden", "submit", "button", "reset", "image"})

_NATIVELY_FOCUSABLE = frozenset({"a", "button", "input", "select", "textarea", "summary"})

_OTHER_LANDMARKS = ("header", "nav", "footer", "aside")

_RESPONSIVE_CLASS_RE = re.compile(r"(?:^|\s)(?:sm|md|lg|xl|2xl):")
_MOTION_RE = re.compile(r"@keyframes\b|\b(?:animation|transition)(?:-[a-z]+)*\s*:")


# =============================================================================
# IMAGES
# =============================================================================

def check_img_alt(ctx: CheckInput) -> List[Violation]:
    """One aggregated violation for all images lacking an alt attribute."""
    missing = [img for img in ctx.doc.find_all("img") if not img.has("alt")]
    if not missing:
        return []
    return [Violation(
        f"{len(missing)} image(s) missing alt attribute",
        line=ctx.doc.line_of_record(missing[0]),
    )]


# =============================================================================
# FORMS
# =============================================================================

def check_input_label(ctx: CheckInput) -> List[Violation]:
    doc = ctx.doc
    targets = doc.label_targets
    violations = []

    for control in doc.find_all("input", "select", "textarea"):
        control_type = (control.get("type") or "text").strip().lower()
        if control.name == "input" and control_type in _UNLABELED_INPUT_TYPES:
            continue
        if any((control.get(attr) or "").strip() for attr in ("aria-label", "aria-labelledby", "title")):
            continue
        control_id = (control.get("id") or "").strip()
        if control_id and control_id in targets:
            continue
        if doc.has_ancestor(control, "label"):
            continue

        shown = f'<input type="{control_type}">' if control.name == "input" else f"<{control.name}>"
        violations.append(Violation(
            f"Form control {shown} has no associated label",
            line=doc.line_of_record(control),
        ))
    return violations


# =============================================================================
# LINKS AND BUTTONS
# =============================================================================

def check_generic_link_text(ctx: CheckInput) -> List[Violation]:
    doc = ctx.doc
    violations = []
    for link in doc.find_all("a"):
        text = doc.text_of(link)
        normalized = text.lower().strip(" .!:…>→")
        if normalized in GENERIC_LINK_TEXTS and not (link.get("aria-label") or "").strip():
            violations.append(Violation(
                f'Link with generic text: "{text}"',
                line=doc.line_of_record(link),
            ))
    return violations


def check_button_name(ctx: CheckInput) -> List[Violation]:
    doc = ctx.doc
    violations = []

    for button in doc.find_all("button"):
        if doc.text_of(button):
            continue
        if any((button.get(attr) or "").strip() for attr in ("aria-label", "aria-labelledby", "title")):
            continue
        image = button.element.find("img", alt=True)
        if image is not None and str(image.get("alt", "")).strip():
            continue
        violations.append(Violation(
            "Button without text or aria-label",
            line=doc.line_of_record(button),
        ))

    for record in doc.iter_records():
        if (record.get("role") or "").strip().lower() != "button":
            continue
        if record.name in _NATIVELY_FOCUSABLE or record.has("tabindex"):
            continue
        violations.append(Violation(
            f'<{record.name} role="button"> is not keyboard focusable (add tabindex="0")',
            line=doc.line_of_record(record),
        ))
    return violations


# =============================================================================
# VISUALS
# =============================================================================

def check_color_contrast(ctx: CheckInput) -> List[Violation]:
    """Compare inline color against inline background on the same element."""
    doc = ctx.doc
    violations = []
    for record in doc.iter_records():
        style = record.get("style")
        if not style:
            continue
        declarations = parse_inline_style(style)
        foreground = parse_color(declarations.get("color", ""))
        background = parse_color(
            declarations.get("background-color") or declarations.get("background", "")
        )
        if foreground is None or background is None:
            continue
        ratio = contrast_ratio(foreground, background)
        if ratio < MIN_CONTRAST_RATIO:
            violations.append(Violation(
                f"Low color contrast ({ratio:.2f}:1) on <{record.name}>, "
                f"minimum is {MIN_CONTRAST_RATIO}:1",
                line=doc.line_of_record(record),
            ))
    return violations


def check_focus_styles(ctx: CheckInput) -> List[Violation]:
    """
    Stylesheets that restyle the page should also style focus.

    Utility-class markup (focus:ring-2 and friends) counts as focus styling.
    """
    sheets = [block for block in ctx.stylesheets if block.text.strip()]
    if not sheets:
        return []
    if any(":focus" in block.text for block in sheets):
        return []
    for record in ctx.doc.iter_records():
        if "focus:" in (record.get("class") or ""):
            return []
    return [Violation("Stylesheet defines no :focus styles for keyboard navigation")]


def check_responsive_media(ctx: CheckInput) -> List[Violation]:
    """Stylesheets without any @media query, unless markup uses sm:/md: utilities."""
    sheets = [block for block in ctx.stylesheets if block.text.strip()]
    if not sheets:
        return []
    if any("@media" in block.text for block in sheets):
        return []
    for record in ctx.doc.iter_records():
        if _RESPONSIVE_CLASS_RE.search(record.get("class") or ""):
            return []
    return [Violation("No media queries found; layout may not adapt to small screens")]


def check_reduced_motion(ctx: CheckInput) -> List[Violation]:
    """Animations and transitions should honour prefers-reduced-motion."""
    for block in ctx.stylesheets:
        if "prefers-reduced-motion" in block.text:
            return []
    for block in ctx.stylesheets:
        match = _MOTION_RE.search(block.text)
        if match:
            return [Violation(
                f"{block.label} animates without a prefers-reduced-motion query",
                line=ctx.line_in(block, match.start()),
            )]
    return []


# =============================================================================
# LANDMARKS
# =============================================================================

def check_main_landmark(ctx: CheckInput) -> List[Violation]:
    """
    Pages laid out with header/nav/footer landmarks should mark their
    main content with <main> (or role="main").

    Fragments and bare documents without any landmark are not reported.
    """
    doc = ctx.doc
    if doc.body is None or doc.find_all("main"):
        return []
    if any((record.get("role") or "").strip().lower() == "main" for record in doc.iter_records()):
        return []
    landmarks = doc.find_all(*_OTHER_LANDMARKS)
    if not landmarks:
        return []
    return [Violation(
        f"Page has a <{landmarks[0].name}> landmark but no <main> for the main content",
        line=doc.line_of_record(landmarks[0]),
    )]
