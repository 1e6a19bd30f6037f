"""
Security Checks - Unsafe links, handlers, sinks and leaked secrets.

Script-level checks read every inline <script> block plus the separate JS
input. Matches inside comments and string literals are ignored where the
pattern is about code (eval); secret detection reads the raw text because
the secret *is* the string literal.
"""

import re
from typing import Dict, List, Optional, Tuple

from ..contracts.checks import CheckInput, Violation
from .source_scan import strip_js_literals


REQUIRED_REL_TOKENS = ("noopener", "noreferrer")

_EXTERNAL_PREFIXES = ("http://", "https://", "//")
_HANDLER_NAME_RE = re.compile(r"^on[a-z]+$")

_HTML_SINK_ASSIGN_RE = re.compile(r"\.(innerHTML|outerHTML)\s*(\+?=)(?!=)")
_HTML_SINK_CALL_RE = re.compile(
    r"\.(insertAdjacentHTML)\s*\(|\bdocument\.(write|writeln)\s*\("
)
_STATIC_LITERAL_RE = re.compile(r"""^(?:"[^"\\]*"|'[^'\\]*'|`[^`$\\]*`)$""")
_TAIL_WINDOW = 2000

_EVAL_PATTERNS = (
    ("eval()", re.compile(r"(?<![\w$.])eval\s*\(")),
    ("new Function()", re.compile(r"\bnew\s+Function\s*\(")),
)
_STRING_TIMER_RE = re.compile(r"\bset(?:Timeout|Interval)\s*\(\s*[\"']")

SECRET_PATTERNS: Tuple[Tuple[str, "re.Pattern"], ...] = (
    ("secret API key (sk_/rk_)", re.compile(r"[\"'`](?:sk|rk)[-_][A-Za-z0-9_\-]{20,}[\"'`]")),
    ("JSON Web Token", re.compile(r"[\"'`]eyJ[A-Za-z0-9_\-]{30,}")),
    ("AWS access key id", re.compile(r"\bAKIA[0-9A-Z]{16}\b")),
    ("GitHub token", re.compile(r"\bgh[pousr]_[A-Za-z0-9]{36,}\b")),
    ("credential assignment", re.compile(
        r"(?i)(?:api[_-]?key|secret|password|access[_-]?token|auth[_-]?token)[\"']?"
        r"\s*[:=]\s*[\"'][^\"'\s]{8,}[\"']"
    )),
)


# =============================================================================
# MARKUP
# =============================================================================

def is_external_href(href: Optional[str]) -> bool:
    return (href or "").strip().lower().startswith(_EXTERNAL_PREFIXES)


def missing_rel_tokens(rel: Optional[str]) -> List[str]:
    """Required rel tokens absent from a rel attribute value."""
    present = set((rel or "").lower().split())
    return [token for token in REQUIRED_REL_TOKENS if token not in present]


def unsafe_blank_links(doc) -> list:
    """
    Located <a target="_blank"> records pointing off-site without
    rel="noopener noreferrer". Shared by the check and the rel fix.
    """
    return [
        link for link in doc.find_all("a")
        if link.located
        and (link.get("target") or "").strip().lower() == "_blank"
        and is_external_href(link.get("href"))
        and missing_rel_tokens(link.get("rel"))
    ]


def check_external_link_rel(ctx: CheckInput) -> List[Violation]:
    doc = ctx.doc
    return [
        Violation(
            f'External link to {link.get("href").strip()} opens a new tab without '
            f'rel="noopener noreferrer"',
            line=doc.line_of_record(link),
        )
        for link in unsafe_blank_links(doc)
    ]


def check_inline_event_handler(ctx: CheckInput) -> List[Violation]:
    """
    One violation per distinct handler attribute name (onclick, onload...).

    Values written as unquoted JSX expressions (onClick={save}) are component
    props, not HTML handlers, and are skipped. Attribute names are
    case-insensitive, so onClick="..." is still reported.
    """
    doc = ctx.doc
    source = doc.source
    counts: Dict[str, int] = {}
    first_line: Dict[str, Optional[int]] = {}

    for record in doc.iter_records():
        for name in record.attrs:
            if not _HANDLER_NAME_RE.match(name):
                continue
            span = record.attr_spans.get(name)
            if _is_jsx_expression(source, span):
                continue
            if name not in counts:
                counts[name] = 0
                first_line[name] = doc.line_of_record(record)
            counts[name] += 1

    return [
        Violation(
            f"Inline {name} handler found ({count} occurrence(s))",
            line=first_line[name],
        )
        for name, count in counts.items()
    ]


# =============================================================================
# SCRIPTS
# =============================================================================

def check_html_injection_sink(ctx: CheckInput) -> List[Violation]:
    """
    Flag HTML sinks fed with dynamic content.

    Assigning a single static string literal to innerHTML/outerHTML is
    allowed, and so is a value passed through a sanitize() call.
    """
    reported: Dict[str, Violation] = {}

    for block in ctx.scripts:
        text = block.text
        for match in _HTML_SINK_ASSIGN_RE.finditer(text):
            kind = f"{match.group(1)} {'append' if match.group(2) == '+=' else 'assignment'}"
            if kind in reported:
                continue
            if _is_static_value(_statement_tail(text, match.end())):
                continue
            reported[kind] = Violation(
                f"Unsafe {kind} with dynamic content (XSS risk)",
                line=ctx.line_in(block, match.start()),
            )
        for match in _HTML_SINK_CALL_RE.finditer(text):
            kind = match.group(1) or f"document.{match.group(2)}"
            if kind in reported:
                continue
            reported[kind] = Violation(
                f"Unsafe {kind}() call (XSS risk)",
                line=ctx.line_in(block, match.start()),
            )

    return list(reported.values())


def check_dynamic_code_eval(ctx: CheckInput) -> List[Violation]:
    reported: Dict[str, Violation] = {}
    for block in ctx.scripts:
        code = strip_js_literals(block.text)
        for label, pattern in _EVAL_PATTERNS:
            match = pattern.search(code)
            if match and label not in reported:
                reported[label] = Violation(
                    f"Dynamic code execution via {label}",
                    line=ctx.line_in(block, match.start()),
                )
        match = _STRING_TIMER_RE.search(block.text)
        if match and "string timer" not in reported:
            reported["string timer"] = Violation(
                "Dynamic code execution via setTimeout/setInterval with a string",
                line=ctx.line_in(block, match.start()),
            )
    return list(reported.values())


def check_hardcoded_secret(ctx: CheckInput) -> List[Violation]:
    """Report each kind of secret once; the secret itself is never echoed."""
    reported: Dict[str, Violation] = {}
    for block in ctx.scripts:
        for label, pattern in SECRET_PATTERNS:
            if label in reported:
                continue
            match = pattern.search(block.text)
            if match:
                reported[label] = Violation(
                    f"Possible hardcoded {label} in {block.label}",
                    line=ctx.line_in(block, match.start()),
                )
    return list(reported.values())


def _statement_tail(text: str, start: int) -> str:
    """Text from start to the end of the statement (";" or newline)."""
    end = min(len(text), start + _TAIL_WINDOW)
    for terminator in (";", "\n"):
        found = text.find(terminator, start, end)
        if found != -1 and found < end:
            end = found
    return text[start:end].strip()


def _is_static_value(value: str) -> bool:
    if "sanitize(" in value:
        return True
    return _STATIC_LITERAL_RE.match(value) is not None


def _is_jsx_expression(source: str, span) -> bool:
    if span is None or not span.has_value or span.quote:
        return False
    return source[span.value_start:span.value_start + 1] == "{"
