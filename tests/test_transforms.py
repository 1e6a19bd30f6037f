"""
Tests for the fix transforms.

Each transform is checked for its exact output, for leaving every other
byte alone, and for reporting applied=False when it has nothing to do.
"""

import pytest

from quality_gate.analyzers import AboveFoldClassifier
from quality_gate.fixers import (
    fix_charset,
    fix_doctype,
    fix_external_link_rel,
    fix_html_lang,
    fix_img_lazy_loading,
    fix_viewport,
)


FILLER = "<p>" + "lorem ipsum " * 60 + "</p>\n"


def _assert_idempotent(transform, html):
    first = transform(html)
    second = transform(first.html)

    assert not second.applied
    assert second.html == first.html


# ============================================================================
# DOCUMENT-LEVEL FIXES
# ============================================================================

class TestFixDoctype:
    """Tests for fix_doctype()."""

    def test_prepends(self):
        outcome = fix_doctype("<html><body></body></html>")

        assert outcome.applied
        assert outcome.html == "<!DOCTYPE html>\n<html><body></body></html>"
        assert outcome.description == "Added <!DOCTYPE html> declaration"

    def test_after_bom(self):
        outcome = fix_doctype("\ufeff<html></html>")

        assert outcome.html == "\ufeff<!DOCTYPE html>\n<html></html>"

    @pytest.mark.parametrize("html", [
        "<!DOCTYPE html><html></html>",
        "  <!doctype HTML>\n<html></html>",
        "",
        "   ",
    ])
    def test_unchanged(self, html):
        outcome = fix_doctype(html)

        assert not outcome.applied
        assert outcome.html == html

    def test_idempotent(self):
        _assert_idempotent(fix_doctype, "<p>fragment</p>")


class TestFixCharset:
    """Tests for fix_charset()."""

    def test_inserts_after_head(self):
        outcome = fix_charset("<html><head><title>T</title></head></html>")

        assert outcome.html == '<html><head>\n<meta charset="UTF-8"><title>T</title></head></html>'
        assert outcome.description == 'Added <meta charset="UTF-8">'

    @pytest.mark.parametrize("meta,expected", [
        ('<meta charset="latin1">', '<meta charset="UTF-8">'),
        ("<meta charset='windows-1252'>", "<meta charset='UTF-8'>"),
        ("<meta charset=latin1>", '<meta charset="UTF-8">'),
        ("<meta charset>", '<meta charset="UTF-8">'),
    ])
    def test_rewrites_existing_value(self, meta, expected):
        outcome = fix_charset(f"<html><head>{meta}</head></html>")

        assert outcome.html == f"<html><head>{expected}</head></html>"
        assert outcome.description == "Changed document charset to UTF-8"

    def test_creates_head(self):
        outcome = fix_charset("<html><body></body></html>")

        assert outcome.html == (
            '<html>\n<head>\n<meta charset="UTF-8">\n</head><body></body></html>'
        )

    def test_fragment_unchanged(self):
        outcome = fix_charset("<p>fragment</p>")

        assert not outcome.applied
        assert outcome.html == "<p>fragment</p>"

    def test_http_equiv_utf8_is_enough(self):
        html = '<head><meta http-equiv="Content-Type" content="text/html; charset=UTF-8"></head>'

        assert not fix_charset(html).applied

    def test_idempotent(self):
        _assert_idempotent(fix_charset, '<html><head><meta charset="latin1"></head></html>')


class TestFixViewport:
    """Tests for fix_viewport()."""

    def test_after_charset(self):
        outcome = fix_viewport('<head>\n  <meta charset="UTF-8">\n  <title>T</title>\n</head>')

        assert outcome.html == (
            '<head>\n  <meta charset="UTF-8">\n'
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
            "  <title>T</title>\n</head>"
        )

    def test_after_head_without_charset(self):
        outcome = fix_viewport("<html><head></head></html>")

        assert outcome.html.startswith('<html><head>\n<meta name="viewport"')

    def test_no_head_unchanged(self):
        assert not fix_viewport("<p>fragment</p>").applied

    def test_existing_viewport_unchanged(self):
        html = '<head><meta name="viewport" content="width=device-width"></head>'

        assert not fix_viewport(html).applied


class TestFixHtmlLang:
    """Tests for fix_html_lang()."""

    @pytest.mark.parametrize("html,expected", [
        ("<html><body></body></html>", '<html lang="en"><body></body></html>'),
        ('<html class="no-js">', '<html lang="en" class="no-js">'),
        ('<html lang="">', '<html lang="en">'),
        ("<html lang>", '<html lang="en">'),
        ("<HTML>", '<HTML lang="en">'),
    ])
    def test_adds_lang(self, html, expected):
        outcome = fix_html_lang(html)

        assert outcome.html == expected
        assert outcome.description == 'Added lang="en" to <html>'

    def test_custom_lang(self):
        assert fix_html_lang("<html>", lang="de").html == '<html lang="de">'

    @pytest.mark.parametrize("html", ['<html lang="fr">', "<div>no root</div>"])
    def test_unchanged(self, html):
        assert not fix_html_lang(html).applied


# ============================================================================
# ELEMENT-LEVEL FIXES
# ============================================================================

class TestFixExternalLinkRel:
    """Tests for fix_external_link_rel()."""

    def test_adds_rel(self):
        outcome = fix_external_link_rel('<a href="https://x.com" target="_blank">x</a>')

        assert outcome.html == (
            '<a rel="noopener noreferrer" href="https://x.com" target="_blank">x</a>'
        )
        assert outcome.description == 'Added rel="noopener noreferrer" to 1 external link(s)'

    @pytest.mark.parametrize("rel,expected", [
        ('rel="nofollow"', 'rel="nofollow noopener noreferrer"'),
        ('rel="noopener"', 'rel="noopener noreferrer"'),
        ("rel=nofollow", 'rel="nofollow noopener noreferrer"'),
        ('rel=""', 'rel="noopener noreferrer"'),
        ("rel", 'rel="noopener noreferrer"'),
    ])
    def test_completes_existing_rel(self, rel, expected):
        html = f'<a href="https://x.com" {rel} target="_blank">x</a>'
        outcome = fix_external_link_rel(html)

        assert outcome.html == f'<a href="https://x.com" {expected} target="_blank">x</a>'

    def test_multiple_links_keep_surroundings(self):
        html = (
            '<nav>\n  <a  href="https://a.dev"  target=_blank>A</a>\n'
            '  <a href="/local" target="_blank">L</a>\n'
            '  <a href="https://b.dev" target="_blank" rel="noopener noreferrer">B</a>\n'
            "  <A HREF='https://c.dev' TARGET='_blank'>C</A>\n</nav>"
        )
        outcome = fix_external_link_rel(html)

        assert outcome.description == 'Added rel="noopener noreferrer" to 2 external link(s)'
        assert outcome.html == html.replace(
            "<a  href", '<a rel="noopener noreferrer"  href'
        ).replace("<A HREF", '<A rel="noopener noreferrer" HREF')

    def test_idempotent(self):
        _assert_idempotent(
            fix_external_link_rel,
            '<a href="https://x.com" target="_blank" rel="nofollow">x</a>',
        )


class TestDuplicateAttributes:
    """Transforms edit the same occurrence the checks read."""

    def test_rel_completes_first_occurrence(self):
        html = '<a href="https://x.com" target="_blank" rel="nofollow" rel="external">x</a>'
        outcome = fix_external_link_rel(html)

        assert outcome.html == (
            '<a href="https://x.com" target="_blank" '
            'rel="nofollow noopener noreferrer" rel="external">x</a>'
        )
        _assert_idempotent(fix_external_link_rel, html)

    def test_lang_fills_first_occurrence(self):
        html = '<html lang="" lang=""><body></body></html>'

        assert fix_html_lang(html).html == '<html lang="en" lang=""><body></body></html>'
        _assert_idempotent(fix_html_lang, html)

    def test_charset_rewrites_first_occurrence(self):
        html = '<html><head><meta charset="latin1" charset="iso-8859-1"></head></html>'

        assert fix_charset(html).html == (
            '<html><head><meta charset="UTF-8" charset="iso-8859-1"></head></html>'
        )
        _assert_idempotent(fix_charset, html)


class TestFixImgLazyLoading:
    """Tests for fix_img_lazy_loading()."""

    def test_marks_below_fold_images_only(self):
        html = (
            '<html><body>\n<img src="hero.png" class="hero">\n'
            + FILLER
            + '<img src="a.png" alt="a">\n<img src="b.png" alt="b" loading="eager">\n'
            + '<img\n  src="c.png">\n</body></html>'
        )
        outcome = fix_img_lazy_loading(html, AboveFoldClassifier())

        assert outcome.description == 'Added loading="lazy" to 2 below-the-fold image(s)'
        assert outcome.html == html.replace(
            '<img src="a.png"', '<img loading="lazy" src="a.png"'
        ).replace('<img\n  src="c.png"', '<img loading="lazy"\n  src="c.png"')

    def test_nothing_to_do(self, compliant_page):
        outcome = fix_img_lazy_loading(compliant_page, AboveFoldClassifier())

        assert not outcome.applied
        assert outcome.html == compliant_page

    def test_idempotent(self):
        html = "<html><body>\n" + FILLER + '<img src="a.png" alt="a">\n</body></html>'

        _assert_idempotent(lambda h: fix_img_lazy_loading(h, AboveFoldClassifier()), html)


class TestBytePreservation:
    """Transforms only touch the bytes they insert or replace."""

    ODD_FORMATTING = (
        "<html>\n<HEAD>\n\t<Title>  Odd  </Title>\n</HEAD>\n"
        "<body   class = 'x'>\n<!-- keep me -->\n<P>unclosed\n"
        "<script>if (a<b && c>d) {}</script>\n</body>\n</html>\n"
    )

    @pytest.mark.parametrize("transform", [
        fix_doctype,
        fix_charset,
        fix_viewport,
        fix_html_lang,
    ])
    def test_only_insertions(self, transform):
        outcome = transform(self.ODD_FORMATTING)

        assert outcome.applied
        # Removing the inserted text must give back the input exactly
        assert len(outcome.html) > len(self.ODD_FORMATTING)
        remaining = iter(outcome.html)
        assert all(ch in remaining for ch in self.ODD_FORMATTING)
