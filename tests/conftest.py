"""
Pytest configuration and shared fixtures for the quality gate tests.

Provides fixtures for:
- Settings, catalog and engines built from defaults
- A page builder producing a fully compliant document around a body
- Check input construction
"""

import logging
from typing import Callable

import pytest

from quality_gate.analyzers import DocumentModel
from quality_gate.catalog import RuleCatalog, build_default_catalog
from quality_gate.contracts import CheckInput
from quality_gate.core.config import Settings
from quality_gate.fixers import AutoFixEngine
from quality_gate.orchestrator import QualityGatePipeline
from quality_gate.scoring import ScoringEngine
from quality_gate.validators import ValidationEngine


# Configure logging for tests
logging.basicConfig(level=logging.INFO)


# ============================================================================
# DOCUMENTS
# ============================================================================

DEFAULT_BODY = "<h1>Acme Widgets</h1>\n<p>Hand-made widgets.</p>"


def build_page(body: str = DEFAULT_BODY, head_extra: str = "", html_attrs: str = ' lang="en"') -> str:
    """Wrap a body in a document that passes every page-level rule."""
    return (
        "<!DOCTYPE html>\n"
        f"<html{html_attrs}>\n"
        "<head>\n"
        '<meta charset="UTF-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        "<title>Acme Widgets</title>\n"
        '<meta name="description" content="Hand-made widgets shipped worldwide.">\n'
        '<meta property="og:title" content="Acme Widgets">\n'
        f"{head_extra}\n"
        "</head>\n"
        "<body>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


COMPLIANT_PAGE = build_page(
    body=(
        '<header><img src="logo.png" alt="Acme logo"></header>\n'
        "<main>\n"
        "<h1>Acme Widgets</h1>\n"
        "<h2>Catalog</h2>\n"
        '<p>Browse the <a href="/catalog">widget catalog</a>.</p>\n'
        "</main>"
    )
)


@pytest.fixture
def page() -> Callable[..., str]:
    """Return the compliant page builder."""
    return build_page


@pytest.fixture
def compliant_page() -> str:
    return COMPLIANT_PAGE


@pytest.fixture
def check_input() -> Callable[..., CheckInput]:
    """Build a CheckInput from markup (and optional CSS/JS)."""
    def _build(html: str, css: str = "", js: str = "") -> CheckInput:
        return CheckInput(doc=DocumentModel(html), css=css, js=js)

    return _build


# ============================================================================
# ENGINES
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (environment and .env ignored)."""
    return Settings(_env_file=None)


@pytest.fixture
def catalog(settings: Settings) -> RuleCatalog:
    return build_default_catalog(settings)


@pytest.fixture
def scoring_engine() -> ScoringEngine:
    return ScoringEngine()


@pytest.fixture
def validator(catalog: RuleCatalog, scoring_engine: ScoringEngine) -> ValidationEngine:
    return ValidationEngine(catalog, scoring_engine)


@pytest.fixture
def fixer(catalog: RuleCatalog) -> AutoFixEngine:
    return AutoFixEngine(catalog)


@pytest.fixture
def pipeline(settings: Settings, catalog: RuleCatalog) -> QualityGatePipeline:
    return QualityGatePipeline(settings=settings, catalog=catalog)


# ============================================================================
# TEST MARKERS
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
