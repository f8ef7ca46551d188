"""Ranking result models.

``ScoredItem`` is the internal sorting primitive; ``RankedResult`` is what
callers receive from a completed ranking call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


@dataclass(frozen=True)
class ScoredItem(Generic[T]):
    """Pairs any item with a numeric score."""

    item: T
    score: float


class RankedResult(BaseModel):
    """Value object for a single ranked recommendation.

    ``rank`` stays 0 until the engine has sorted a result set; it describes a
    position in one response, not a property of the product.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    title: str
    price: float
    image_url: str = ""
    link: str = ""
    description: str = ""
    avg_rating: float = 0.0
    review_count: int = 0
    category: str = ""
    score: float
    rank: int = Field(default=0, ge=0)

    @property
    def rank_badge(self) -> str:
        """Short label for result lists (rank 1 is the best match)."""
        if self.rank == 1:
            return "BEST"
        return f"#{self.rank}"

    def with_rank(self, rank: int) -> RankedResult:
        return self.model_copy(update={"rank": rank})

    def __str__(self) -> str:
        return (
            f"[{self.rank_badge}] {self.title} - {self.price:.2f} "
            f"(score: {self.score:.2f}, rating: {self.avg_rating:.1f}, reviews: {self.review_count})"
        )
