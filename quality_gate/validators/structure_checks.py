"""
Structure Checks - Document skeleton, headings and embedded syntax.

Each check receives a CheckInput and returns a list of Violations; an empty
list means the rule passed. Checks never raise on malformed markup: a
degraded DocumentModel simply has no tags, which the checks report
conservatively (missing body, missing title, ...).
"""

import re
from typing import List

from ..contracts.checks import CheckInput, Violation
from .source_scan import strip_css_literals, strip_js_literals, unbalanced_pairs


_HEADING_NAMES = ("h1", "h2", "h3", "h4", "h5", "h6")
_UTF8_LABELS = frozenset({"utf-8", "utf8"})
_CONTENT_TYPE_CHARSET_RE = re.compile(r"charset\s*=\s*([\w-]+)", re.IGNORECASE)


def check_non_empty(ctx: CheckInput) -> List[Violation]:
    if ctx.doc.is_blank:
        return [Violation("Markup is empty")]
    return []


def check_doctype(ctx: CheckInput) -> List[Violation]:
    if ctx.doc.has_doctype:
        return []
    return [Violation("Missing <!DOCTYPE html> declaration", line=1)]


def check_charset(ctx: CheckInput) -> List[Violation]:
    """
    The first <meta charset> decides the encoding; it must be UTF-8.

    Without one, an http-equiv Content-Type declaring UTF-8 is accepted.
    """
    doc = ctx.doc
    declared = [m for m in doc.find_all("meta") if m.has("charset")]
    if declared:
        first = declared[0]
        value = (first.get("charset") or "").strip()
        if value.lower() in _UTF8_LABELS:
            return []
        shown = value or "(empty)"
        return [Violation(
            f"Document charset is {shown}, expected UTF-8",
            line=doc.line_of_record(first),
        )]

    for meta in doc.meta(**{"http-equiv": "content-type"}):
        match = _CONTENT_TYPE_CHARSET_RE.search(meta.get("content") or "")
        if match and match.group(1).lower() in _UTF8_LABELS:
            return []

    return [Violation('Missing <meta charset="UTF-8"> declaration')]


def check_viewport(ctx: CheckInput) -> List[Violation]:
    if ctx.doc.meta(name="viewport"):
        return []
    return [Violation("Missing viewport meta tag (required for responsive layout)")]


def check_html_lang(ctx: CheckInput) -> List[Violation]:
    html = ctx.doc.html_tag
    if html is None:
        return [Violation("Missing <html> element with a lang attribute")]
    if (html.get("lang") or "").strip():
        return []
    return [Violation(
        "Missing lang attribute on <html>",
        line=ctx.doc.line_of_record(html),
    )]


def check_body(ctx: CheckInput) -> List[Violation]:
    if ctx.doc.body is not None:
        return []
    return [Violation("Missing <body> element")]


def check_truncated(ctx: CheckInput) -> List[Violation]:
    """Flag documents whose <html> or <body> is opened but never closed."""
    doc = ctx.doc
    unclosed = [
        name for name in ("html", "body")
        if doc.first(name) is not None and not doc.has_closing_tag(name)
    ]
    if not unclosed:
        return []
    tags = ", ".join(f"</{name}>" for name in unclosed)
    return [Violation(f"Document appears truncated: missing closing {tags}")]


def check_title(ctx: CheckInput) -> List[Violation]:
    doc = ctx.doc
    titles = doc.find_all("title")
    if not titles:
        return [Violation("Missing <title> element")]
    if any(doc.text_of(title) for title in titles):
        return []
    return [Violation("Empty <title> element", line=doc.line_of_record(titles[0]))]


def check_h1_missing(ctx: CheckInput) -> List[Violation]:
    if ctx.doc.find_all("h1"):
        return []
    return [Violation("Missing <h1> heading")]


def check_h1_multiple(ctx: CheckInput) -> List[Violation]:
    headings = ctx.doc.find_all("h1")
    if len(headings) <= 1:
        return []
    return [Violation(
        f"Multiple <h1> headings found ({len(headings)})",
        line=ctx.doc.line_of_record(headings[1]),
    )]


def check_heading_order(ctx: CheckInput) -> List[Violation]:
    """Report the first heading that skips a level (h2 -> h4)."""
    doc = ctx.doc
    previous = 0
    for heading in doc.find_all(*_HEADING_NAMES):
        level = int(heading.name[1])
        if previous and level > previous + 1:
            return [Violation(
                f"Heading level skipped: <h{previous}> followed by <h{level}>",
                line=doc.line_of_record(heading),
            )]
        previous = level
    return []


def check_css_syntax(ctx: CheckInput) -> List[Violation]:
    violations = []
    for block in ctx.stylesheets:
        counts = unbalanced_pairs(strip_css_literals(block.text), "{}")
        if "{}" in counts:
            opened, closed = counts["{}"]
            violations.append(Violation(
                f"Unbalanced braces in {block.label}: {opened} '{{' vs {closed} '}}'",
                line=ctx.line_in(block, 0),
            ))
    return violations


def check_js_syntax(ctx: CheckInput) -> List[Violation]:
    violations = []
    for block in ctx.scripts:
        counts = unbalanced_pairs(strip_js_literals(block.text), "(){}[]")
        if counts:
            detail = ", ".join(
                f"{opened} '{pair[0]}' vs {closed} '{pair[1]}'"
                for pair, (opened, closed) in counts.items()
            )
            violations.append(Violation(
                f"Unbalanced brackets in {block.label}: {detail}",
                line=ctx.line_in(block, 0),
            ))
    return violations
