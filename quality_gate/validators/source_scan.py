"""
Source Scan - Linear lexical helpers for embedded CSS and JavaScript.

The checks never parse CSS or JS properly; they look at token shapes.
These helpers blank out comments and literals so brace counting and
keyword searches are not fooled by text inside strings, and parse inline
style colors for the contrast heuristic.

Every helper is a single left-to-right pass.
"""

import re
from typing import Dict, Optional, Tuple


RGB = Tuple[int, int, int]

# A "/" after one of these starts a regex literal rather than a division
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};+-*%<>~^")

_HEX_COLOR_RE = re.compile(r"#([0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{3,4})\b")
_RGB_COLOR_RE = re.compile(
    r"rgba?\(\s*(\d{1,3})\s*[,\s]\s*(\d{1,3})\s*[,\s]\s*(\d{1,3})", re.IGNORECASE
)

_NAMED_COLORS: Dict[str, RGB] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "silver": (192, 192, 192),
    "lightgray": (211, 211, 211),
    "lightgrey": (211, 211, 211),
    "darkgray": (169, 169, 169),
    "darkgrey": (169, 169, 169),
    "navy": (0, 0, 128),
    "maroon": (128, 0, 0),
    "teal": (0, 128, 128),
    "pink": (255, 192, 203),
}


# =============================================================================
# JAVASCRIPT
# =============================================================================

def strip_js_literals(code: str) -> str:
    """
    Blank out comments, string, template and regex literals.

    Every literal character becomes a space (newlines are kept), so the
    result has the same length and line structure as the input and
    positions found in it map straight back to the source.

    Args:
        code: JavaScript source

    Returns:
        Code of the same length with literal content blanked
    """
    out = []
    i = 0
    length = len(code)
    previous = ""

    while i < length:
        ch = code[i]

        if ch in ("'", '"', "`"):
            end = _skip_quoted(code, i, ch)
            out.append(_blank(code[i:end]))
            i = end
            previous = '"'
            continue

        if ch == "/" and i + 1 < length:
            nxt = code[i + 1]
            if nxt == "/":
                newline = code.find("\n", i)
                end = length if newline == -1 else newline
                out.append(_blank(code[i:end]))
                i = end
                continue
            if nxt == "*":
                close = code.find("*/", i + 2)
                end = length if close == -1 else close + 2
                out.append(_blank(code[i:end]))
                i = end
                continue
            if previous == "" or previous in _REGEX_PRECEDERS:
                end = _skip_regex(code, i)
                if end is not None:
                    out.append(_blank(code[i:end]))
                    i = end
                    previous = "/"
                    continue

        out.append(ch)
        if not ch.isspace():
            previous = ch
        i += 1

    return "".join(out)


def _blank(segment: str) -> str:
    return "".join("\n" if c == "\n" else " " for c in segment)


def _skip_quoted(code: str, start: int, quote: str) -> int:
    """Return the index just past the literal opened at start."""
    i = start + 1
    length = len(code)
    while i < length:
        ch = code[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote != "`":
            # Unterminated single-line string; stop at the line end
            return i
        i += 1
    return length


def _skip_regex(code: str, start: int) -> Optional[int]:
    """Return the index past a regex literal (and its flags), or None."""
    i = start + 1
    length = len(code)
    in_class = False
    while i < length:
        ch = code[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "\n":
            return None
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "/":
            i += 1
            while i < length and code[i].isalpha():
                i += 1
            return i
        i += 1
    return None


def unbalanced_pairs(code: str, pairs: str) -> Dict[str, Tuple[int, int]]:
    """
    Count opening/closing characters.

    Args:
        code: Text with literals already stripped
        pairs: Concatenated open/close characters, e.g. "(){}[]"

    Returns:
        Mapping "()" -> (opened, closed) for every pair whose counts differ
    """
    result = {}
    for k in range(0, len(pairs), 2):
        opener, closer = pairs[k], pairs[k + 1]
        opened = code.count(opener)
        closed = code.count(closer)
        if opened != closed:
            result[opener + closer] = (opened, closed)
    return result


# =============================================================================
# CSS
# =============================================================================

def strip_css_literals(css: str) -> str:
    """Blank out CSS comments and quoted strings (length preserving)."""
    out = []
    i = 0
    length = len(css)
    while i < length:
        ch = css[i]
        if ch == "/" and css.startswith("/*", i):
            close = css.find("*/", i + 2)
            end = length if close == -1 else close + 2
            out.append(_blank(css[i:end]))
            i = end
            continue
        if ch in ("'", '"'):
            end = _skip_quoted(css, i, ch)
            out.append(_blank(css[i:end]))
            i = end
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def parse_inline_style(style: str) -> Dict[str, str]:
    """
    Parse a style attribute into lowercase property -> value.

    Later declarations override earlier ones, as in the cascade.
    """
    declarations = {}
    for chunk in style.split(";"):
        prop, sep, value = chunk.partition(":")
        if not sep:
            continue
        prop = prop.strip().lower()
        value = value.replace("!important", "").strip()
        if prop and value:
            declarations[prop] = value
    return declarations


# =============================================================================
# COLORS
# =============================================================================

def parse_color(value: str) -> Optional[RGB]:
    """
    Extract the first color from a CSS value.

    Supports hex (#rgb, #rrggbb, with optional alpha), rgb()/rgba() and a
    small set of named colors. Returns None for anything else
    (var(), gradients, transparent, currentColor).
    """
    value = value.strip()
    match = _HEX_COLOR_RE.search(value)
    if match:
        digits = match.group(1)
        if len(digits) in (3, 4):
            return tuple(int(d * 2, 16) for d in digits[:3])
        return tuple(int(digits[k:k + 2], 16) for k in (0, 2, 4))

    match = _RGB_COLOR_RE.search(value)
    if match:
        channels = tuple(int(c) for c in match.groups())
        if all(c <= 255 for c in channels):
            return channels
        return None

    for token in value.lower().split():
        if token in _NAMED_COLORS:
            return _NAMED_COLORS[token]
    return None


def relative_luminance(rgb: RGB) -> float:
    """WCAG relative luminance of an sRGB color."""
    def channel(c: int) -> float:
        s = c / 255.0
        return s / 12.92 if s <= 0.03928 else ((s + 0.055) / 1.055) ** 2.4

    r, g, b = (channel(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(foreground: RGB, background: RGB) -> float:
    """WCAG contrast ratio between two colors, in [1, 21]."""
    lighter, darker = sorted(
        (relative_luminance(foreground), relative_luminance(background)),
        reverse=True,
    )
    return (lighter + 0.05) / (darker + 0.05)
