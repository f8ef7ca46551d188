"""Domain layer - catalog data and ranking results with no infrastructure dependencies.

- Entities: ``Product`` (identity is its id)
- Value Objects: ``Review``, ``RankedResult``, ``ScoredItem``
- Caller-owned selections: ``ComparisonSelection``, ``Wishlist``
"""

from catalog_ranker.domain.model import Product, Review
from catalog_ranker.domain.results import RankedResult, ScoredItem
from catalog_ranker.domain.selection import ComparisonSelection, Wishlist


__all__ = [
    "ComparisonSelection",
    "Product",
    "RankedResult",
    "Review",
    "ScoredItem",
    "Wishlist",
]
