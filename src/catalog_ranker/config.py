"""Centralized configuration for catalog-ranker using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed ranking configuration loaded from environment variables.

    Every value defaults to the constants the ranking pipeline was tuned
    with, so an empty environment reproduces the reference behavior. Values
    are read from ``CATALOG_RANKER_*`` variables or a local ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_RANKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Composite score weights (must sum to 1.0)
    similarity_weight: float = Field(default=0.40, ge=0.0, le=1.0, description="Weight of text similarity")
    rating_weight: float = Field(default=0.30, ge=0.0, le=1.0, description="Weight of average review rating")
    review_weight: float = Field(default=0.15, ge=0.0, le=1.0, description="Weight of review volume")
    price_weight: float = Field(default=0.15, ge=0.0, le=1.0, description="Weight of price affordability")

    # Similarity bonuses
    title_match_bonus: float = Field(
        default=0.2, ge=0.0, description="Bonus when the normalized title contains the full query"
    )
    category_match_bonus: float = Field(
        default=0.15, ge=0.0, description="Bonus when query and category contain one another"
    )
    fuzzy_match_bonus: float = Field(
        default=0.15, ge=0.0, description="Bonus scaled by the share of query keywords found fuzzily"
    )
    max_similarity: float = Field(default=1.0, gt=0.0, description="Upper clamp applied after bonuses")

    # Fixed normalization scales
    price_reference: float = Field(default=1000.0, gt=0.0, description="Price at which affordability reaches 0")
    review_reference: int = Field(default=100, ge=1, description="Review count at which volume saturates")
    max_rating: float = Field(default=5.0, gt=0.0, description="Top of the rating scale")

    # Result shaping
    min_score_threshold: float = Field(default=0.15, description="Results scoring below this are dropped")
    min_keyword_length: int = Field(
        default=3, ge=1, description="Query tokens shorter than this never trigger fuzzy exclusion"
    )
    default_max_results: int = Field(default=20, ge=1, description="Result cap when the caller gives none")
    all_categories_label: str = Field(
        default="All Categories", description="Category sentinel that disables category filtering"
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_weights(self) -> "Settings":
        total = self.similarity_weight + self.rating_weight + self.review_weight + self.price_weight
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Ranking weights must sum to 1.0, got {total}")
        return self

    def is_category_filter(self, category: str | None) -> bool:
        """Return True when ``category`` should restrict the catalog.

        Empty strings and the "all categories" sentinel (any casing) disable
        the filter.
        """
        if not category:
            return False
        return category.lower() != self.all_categories_label.lower()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return Settings()
