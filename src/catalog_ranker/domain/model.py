"""Domain model - catalog entities and value objects.

- Reviews are immutable value objects.
- Products are entities identified by ``id``; their rating aggregates follow
  the reviews attached to them.
- Uses Pydantic dataclasses for validation at construction.
"""

import datetime

from pydantic import Field
from pydantic.dataclasses import dataclass


# Value Objects (immutable)
@dataclass(frozen=True)
class Review:
    """A single customer review.

    Only the rating feeds ranking, through the owning product's aggregate.
    The text fields are kept for display and sentiment scoring.
    """

    author: str = ""
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    title: str = ""
    body: str = ""
    date: datetime.date | None = None


# Entities (have identity, can be mutable)
@dataclass
class Product:
    """Catalog item with aggregated review information.

    ``id`` is a stable string derived upstream from the product's canonical
    URL. ``avg_rating`` and ``review_count`` summarize ``reviews``: they are
    recomputed whenever reviews are supplied or attached. A product created
    with explicit aggregates and no reviews keeps those aggregates, which
    lets loaders that only carry summary data skip the review rows.
    """

    id: str
    title: str
    price: float = Field(default=0.0, ge=0.0)
    category: str = ""
    description: str = ""
    link: str = ""
    image_url: str = ""
    reviews: list[Review] = Field(default_factory=list)
    avg_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)

    def __post_init__(self) -> None:
        if self.reviews:
            self._recompute_aggregates()

    def __eq__(self, other: object) -> bool:
        """Products are equal if they share the same id (identity)."""
        if not isinstance(other, Product):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def add_review(self, review: Review) -> None:
        """Attach a review and refresh the rating aggregates."""
        self.reviews.append(review)
        self._recompute_aggregates()

    def document_text(self) -> str:
        """Text used to place the product in the vector space."""
        return f"{self.title or ''} {self.description or ''}"

    def _recompute_aggregates(self) -> None:
        count = len(self.reviews)
        average = sum(review.rating for review in self.reviews) / count if count else 0.0
        object.__setattr__(self, "review_count", count)
        object.__setattr__(self, "avg_rating", average)
