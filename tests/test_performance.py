"""
Performance tests.

Work is bounded only by input size, so every check must stay linear.
These inputs target the patterns most likely to backtrack.
"""

import time

import pytest

from quality_gate.validators import is_code_complete


LIMIT_SECONDS = 10.0


def _timed(fn, *args, **kwargs):
    start = time.perf_counter()
    result = fn(*args, **kwargs)
    return result, time.perf_counter() - start


def _large_document(sections: int) -> str:
    section = (
        '<section class="card">\n'
        '  <h2>Item</h2>\n'
        '  <img src="item.png" alt="Item">\n'
        '  <a href="https://shop.example.com" target="_blank">Buy the item</a>\n'
        '  <p style="color: #333; background-color: #fff">Description text.</p>\n'
        "</section>\n"
    )
    return (
        "<html><head><title>Catalog</title></head><body>\n<h1>Catalog</h1>\n"
        + section * sections
        + "<script>\n"
        + "document.querySelectorAll('.card').forEach((el) => { el.dataset.seen = '1'; });\n" * 200
        + "</script>\n</body></html>"
    )


@pytest.mark.slow
class TestPerformance:
    """Large and pathological inputs finish quickly."""

    def test_large_document_validate_and_fix(self, pipeline):
        html = _large_document(600)

        report, elapsed = _timed(pipeline.run, html)

        assert elapsed < LIMIT_SECONDS
        assert "security.external-link-rel" in report.fix.resolved_rule_ids
        assert "performance.img-lazy-loading" in report.fix.resolved_rule_ids

    @pytest.mark.parametrize("js", [
        "el.innerHTML = " + "a + " * 20000 + "b",
        "x" + " " * 50000 + "= 1",
        '"' + "\\" * 50001,
        "/" * 50000,
        "setTimeout(" + " " * 50000,
        "password" + " " * 50000 + ":",
        "`" + "${" * 20000,
        "eval" + " " * 50000,
    ])
    def test_pathological_scripts(self, validator, js):
        _, elapsed = _timed(validator.validate_all, "<p>x</p>", js=js)

        assert elapsed < LIMIT_SECONDS

    @pytest.mark.parametrize("html", [
        "<div " + "a=b " * 30000 + ">",
        "<p style=\"" + "color: red; " * 20000 + "\">x</p>",
        "<a href='https://x.dev' target=_blank>x</a>\n" * 5000,
        "<p>" * 2000,
        '<img src="a.png" alt="' + "hero " * 20000 + '">',
    ])
    def test_pathological_markup(self, validator, html):
        _, elapsed = _timed(validator.validate_all, html)

        assert elapsed < LIMIT_SECONDS

    def test_is_code_complete_on_large_input(self):
        code = "function f() { return [1, 2, 3]; }\n" * 50000

        result, elapsed = _timed(is_code_complete, code, "js")

        assert result
        assert elapsed < LIMIT_SECONDS
