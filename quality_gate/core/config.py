"""
Configuration module - centralized settings for the quality gate.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Quality gate settings loaded from environment variables.

    Every field can be overridden with a QUALITY_GATE_-prefixed variable:
        export QUALITY_GATE_PASS_THRESHOLD=75
        export QUALITY_GATE_ABOVE_FOLD_KEYWORDS='["hero", "logo", "banner", "masthead"]'
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_prefix="QUALITY_GATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # ABOVE-THE-FOLD HEURISTICS (lazy-loading safety)
    # ---------------------------------------------------------------------------
    # ABOVE_FOLD_KEYWORDS: class/id/alt substrings marking an image as visible
    # without scrolling. Matched case-insensitively.
    ABOVE_FOLD_KEYWORDS: List[str] = Field(
        default_factory=lambda: ["hero", "logo", "banner"]
    )

    # ABOVE_FOLD_IMAGE_COUNT: the first N images of <body> are treated as
    # above the fold. 0 disables the positional rule.
    ABOVE_FOLD_IMAGE_COUNT: int = Field(default=0, ge=0)

    # ABOVE_FOLD_BYTE_RATIO: images starting in this leading fraction of the
    # document are treated as above the fold.
    ABOVE_FOLD_BYTE_RATIO: float = Field(default=0.10, ge=0.0, le=1.0)

    # ---------------------------------------------------------------------------
    # SCORING
    # ---------------------------------------------------------------------------
    # PASS_THRESHOLD: minimum score for passed=True (critical errors still fail)
    PASS_THRESHOLD: int = Field(default=70, ge=0, le=100)

    # ---------------------------------------------------------------------------
    # RULE TUNING
    # ---------------------------------------------------------------------------
    # DEFAULT_LANG: value written by the lang auto-fix
    DEFAULT_LANG: str = "en"

    # LARGE_INLINE_SCRIPT_CHARS: inline <script> bodies above this size are flagged
    LARGE_INLINE_SCRIPT_CHARS: int = Field(default=5000, gt=0)

    # ---------------------------------------------------------------------------
    # PIPELINE
    # ---------------------------------------------------------------------------
    # MAX_MARKUP_CHARS: the pipeline refuses inputs above this size; the
    # engine itself has no timeouts, so callers cap work by input size
    MAX_MARKUP_CHARS: int = Field(default=500_000, gt=0)

    # LOG_LEVEL: level of the quality_gate logger
    LOG_LEVEL: str = "INFO"

    @field_validator("ABOVE_FOLD_KEYWORDS")
    @classmethod
    def _normalize_keywords(cls, value: List[str]) -> List[str]:
        return [kw.strip().lower() for kw in value if kw and kw.strip()]

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown LOG_LEVEL: {value}")
        return value

    @field_validator("DEFAULT_LANG")
    @classmethod
    def _require_lang(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("DEFAULT_LANG must not be blank")
        return value


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from quality_gate.core.config import settings
settings = Settings()
