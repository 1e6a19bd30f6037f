"""
Tests for AutoFixEngine.

The engine-level properties (resolution, idempotence, no-regression) are
checked over a corpus of well-formed, partial and hostile markup.
"""

import pytest

from quality_gate.catalog import INTERNAL_RULE_ERROR, RuleCatalog, RuleSpec
from quality_gate.contracts import Category, Severity, SeverityTier
from quality_gate.fixers import AutoFixEngine

from conftest import COMPLIANT_PAGE, build_page


FILLER = "<p>" + "lorem ipsum " * 60 + "</p>\n"

CORPUS = [
    pytest.param('<html><body><img src="x.jpg"></body></html>', id="bare-image"),
    pytest.param('<a href="https://example.com">Click here</a>', id="fragment"),
    pytest.param("", id="empty"),
    pytest.param(COMPLIANT_PAGE, id="compliant"),
    pytest.param(
        "<html>\n<head><title>Shop</title></head>\n<body>\n<h1>Shop</h1>\n"
        + FILLER
        + '<a href="https://a.dev" target="_blank">A</a>\n'
        + '<a href="https://b.dev" target="_blank" rel="nofollow">B</a>\n'
        + '<img src="1.png" alt="1">\n<img src="logo.png" class="logo" alt="Logo">\n'
        + "</body>\n</html>",
        id="links-and-images",
    ),
    pytest.param('\ufeff  <html lang=""><head></head><body><p>x</p></body></html>', id="bom"),
    pytest.param(
        "<HTML><HEAD><TITLE>T</TITLE></HEAD><BODY>" + FILLER + "<IMG SRC='a.png'></BODY></HTML>",
        id="uppercase",
    ),
    pytest.param(
        '<html><head><meta charset="latin1"><meta charset="utf-8"></head><body></body></html>',
        id="wrong-charset",
    ),
    pytest.param(
        '<a href="https://x.com" target="_blank" rel="nofollow" rel="external">X</a>',
        id="duplicate-rel",
    ),
    pytest.param('<html lang="" lang=""><body><p>x</p></body></html>', id="duplicate-lang"),
    pytest.param(
        '<html><head><meta charset="latin1" charset="iso-8859-1"></head><body></body></html>',
        id="duplicate-charset",
    ),
    pytest.param("<html><head><title>x</title><body><p>cut", id="truncated"),
    pytest.param("<div className='x'><img src={a} /></div>", id="jsx"),
    pytest.param("<<<>>><div <p =>", id="garbage"),
    pytest.param("<!-- unterminated <html><body>", id="open-comment"),
    pytest.param(
        "<head><title>T</title></head><body>" + FILLER + "<img src=a.png></body>",
        id="no-html-tag",
    ),
    pytest.param(
        build_page(body='<img src="hero.jpg" class="hero-banner" alt="Hero">\n' + FILLER),
        id="hero",
    ),
]


def _failing_fix(html):
    raise RuntimeError("transform exploded")


class TestAutoFix:
    """Tests for auto_fix()."""

    def test_requires_validation_result(self, fixer):
        with pytest.raises(ValueError):
            fixer.auto_fix("<html></html>", None)

    def test_applies_in_priority_order(self, fixer, validator):
        html = '<html><body><img src="x.jpg"></body></html>'
        result = fixer.auto_fix(html, validator.validate_all(html))

        assert result.resolved_rule_ids == [
            "structure.doctype",
            "structure.charset",
            "structure.viewport",
            "structure.html-lang",
            "performance.img-lazy-loading",
        ]
        assert result.fixed.startswith("<!DOCTYPE html>\n<html lang=\"en\">")
        assert result.changed

    def test_remaining_issues(self, fixer, validator):
        html = '<html><body><img src="x.jpg"></body></html>'
        initial = validator.validate_all(html)
        result = fixer.auto_fix(html, initial)

        assert initial.total == 10
        assert result.remaining_issues == 5

    def test_nothing_to_fix(self, fixer, validator, compliant_page):
        result = fixer.auto_fix(compliant_page, validator.validate_all(compliant_page))

        assert result.applied_fixes == []
        assert result.fixed == compliant_page
        assert result.remaining_issues == 0
        assert not result.changed

    def test_none_markup_counts_as_empty(self, fixer, validator):
        result = fixer.auto_fix(None, validator.validate_all(None))

        assert result.fixed == ""
        assert result.applied_fixes == []

    def test_failing_transform_is_skipped(self, catalog, validator, caplog):
        broken = RuleSpec(
            "structure.broken", Category.STRUCTURE, SeverityTier.WARNING, Severity.LOW,
            title="Broken fix",
            check=lambda ctx: [],
            fix=_failing_fix,
            fix_priority=1,
        )
        engine = AutoFixEngine(RuleCatalog([
            broken,
            catalog.get("structure.doctype"),
            INTERNAL_RULE_ERROR,
        ]))
        html = "<html><body></body></html>"

        result = engine.auto_fix(html, validator.validate_all(html))

        assert result.resolved_rule_ids == ["structure.doctype"]
        assert "structure.broken" in caplog.text

    def test_to_dict(self, fixer, validator):
        html = "<p>x</p>"
        data = fixer.auto_fix(html, validator.validate_all(html)).to_dict()

        assert data["fixed"] == "<!DOCTYPE html>\n<p>x</p>"
        assert data["appliedFixes"] == ["Added <!DOCTYPE html> declaration"]
        assert data["resolvedRuleIds"] == ["structure.doctype"]


class TestFixProperties:
    """Resolution, idempotence and no-regression over the corpus."""

    @pytest.mark.parametrize("html", CORPUS)
    def test_applied_rules_are_resolved(self, fixer, validator, html):
        result = fixer.auto_fix(html, validator.validate_all(html))
        after = validator.validate_all(result.fixed)

        assert not set(result.resolved_rule_ids) & after.rule_ids()

    @pytest.mark.parametrize("html", CORPUS)
    def test_idempotent(self, fixer, validator, html):
        first = fixer.auto_fix(html, validator.validate_all(html))
        second = fixer.auto_fix(first.fixed, validator.validate_all(first.fixed))

        assert second.applied_fixes == []
        assert second.fixed == first.fixed

    @pytest.mark.parametrize("html", CORPUS)
    def test_no_regression(self, fixer, validator, html):
        before = validator.validate_all(html)
        after = validator.validate_all(fixer.auto_fix(html, before).fixed)

        assert after.score >= before.score

    @pytest.mark.parametrize("html", CORPUS)
    def test_keyword_images_never_lazy(self, fixer, validator, html):
        fixed = fixer.auto_fix(html, validator.validate_all(html)).fixed

        assert 'class="hero-banner" loading="lazy"' not in fixed
        assert '<img loading="lazy" src="hero.jpg"' not in fixed
        assert '<img loading="lazy" src="logo.png"' not in fixed
