"""
SEO Checks - Search and social metadata.
"""

from typing import List

from ..contracts.checks import CheckInput, Violation


def check_meta_description(ctx: CheckInput) -> List[Violation]:
    descriptions = ctx.doc.meta(name="description")
    if any((meta.get("content") or "").strip() for meta in descriptions):
        return []
    if descriptions:
        return [Violation(
            "Empty meta description",
            line=ctx.doc.line_of_record(descriptions[0]),
        )]
    return [Violation("Missing meta description")]


def check_open_graph(ctx: CheckInput) -> List[Violation]:
    for meta in ctx.doc.find_all("meta"):
        if (meta.get("property") or "").strip().lower().startswith("og:"):
            return []
    return [Violation("Missing Open Graph tags (og:title, og:description, og:image)")]
