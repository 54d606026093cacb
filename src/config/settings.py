# src/config/settings.py - v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for storage, analysis, rendering and logging settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


# Named similarity configurations: (threshold, min word length, shingle orders).
# "shingle" compares 2/3/4-grams of filtered words, "word" compares plain word sets.
SIMILARITY_PROFILES: dict[str, tuple[float, int, str]] = {
    "shingle": (0.3, 3, "2,3,4"),
    "word": (0.1, 1, "1"),
}


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Storage ===
    storage_backend: Literal["sqlite", "json", "redis"] = "sqlite"
    storage_root: Path = Path("~/.textscope/store")
    redis_url: str = ""
    store_timeout_s: float = 5.0
    max_concurrent_fetches: int = 8

    # === Similarity ===
    similarity_profile: Literal["shingle", "word", "custom"] = "shingle"
    similarity_threshold: float = 0.3
    shingle_orders: str = "2,3,4"
    shingle_min_word_length: int = 3
    shingle_strip_punctuation: bool = False
    stop_words_file: Path | None = None

    # === Frequency ===
    top_k_words: int = 10
    frequency_min_word_length: int = 3
    frequency_exclude_stop_words: bool = False

    # === Word cloud rendering ===
    wordcloud_api_url: str = "https://quickchart.io/wordcloud"
    wordcloud_timeout_s: float = 10.0
    wordcloud_top_k: int = 100
    wordcloud_min_word_length: int = 1
    wordcloud_width: int = 800
    wordcloud_height: int = 400
    wordcloud_format: Literal["png", "svg"] = "png"
    wordcloud_font_scale: int = 15
    wordcloud_colors: str = "#1f77b4,#ff7f0e,#2ca02c,#d62728,#9467bd"
    wordcloud_payload_style: Literal["mapping", "lines"] = "mapping"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("similarity_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("similarity_threshold must be within [0, 1]")
        return v

    @field_validator("shingle_orders")
    @classmethod
    def validate_shingle_orders(cls, v: str) -> str:
        """Orders must be a comma-separated list of positive integers."""
        parts = [p.strip() for p in v.split(",") if p.strip()]
        if not parts:
            raise ValueError("shingle_orders must list at least one order")
        for part in parts:
            if not part.isdigit() or int(part) < 1:
                raise ValueError(f"shingle_orders entry {part!r} is not a positive integer")
        return v

    @field_validator("store_timeout_s", "wordcloud_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator(
        "max_concurrent_fetches", "top_k_words", "wordcloud_top_k",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be >= 1")
        return v

    @model_validator(mode="before")
    @classmethod
    def apply_similarity_profile(cls, data: object) -> object:
        """Fill threshold, word length and orders from the named profile.

        Explicitly provided values win over the profile defaults.
        """
        if not isinstance(data, dict):
            return data
        profile = data.get("similarity_profile", "shingle")
        if profile not in SIMILARITY_PROFILES:
            return data
        threshold, min_len, orders = SIMILARITY_PROFILES[profile]
        data.setdefault("similarity_threshold", threshold)
        data.setdefault("shingle_min_word_length", min_len)
        data.setdefault("shingle_orders", orders)
        return data

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.storage_backend == "redis" and not self.redis_url:
            errors.append("STORAGE_BACKEND=redis requires REDIS_URL")

        if self.stop_words_file is not None and not self.stop_words_file.expanduser().is_file():
            errors.append(f"STOP_WORDS_FILE not found: {self.stop_words_file}")

        if self.wordcloud_width < 1 or self.wordcloud_height < 1:
            errors.append("WORDCLOUD_WIDTH and WORDCLOUD_HEIGHT must be positive")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def shingle_orders_list(self) -> list[int]:
        """Parse comma-separated shingle orders."""
        return sorted({int(p.strip()) for p in self.shingle_orders.split(",") if p.strip()})

    @property
    def wordcloud_colors_list(self) -> list[str]:
        """Parse comma-separated word cloud colors."""
        return [c.strip() for c in self.wordcloud_colors.split(",") if c.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
