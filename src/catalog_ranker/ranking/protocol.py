"""Interface of a catalog ranking engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from catalog_ranker.domain.results import RankedResult


@runtime_checkable
class RankingEngine(Protocol):
    """Surface consumed by presentation layers and filter widgets."""

    @property
    def is_ready(self) -> bool:  # pragma: no cover - Protocol only
        """Return True once a catalog snapshot has been fitted."""

    def get_recommendations(  # pragma: no cover - Protocol only
        self,
        query: str,
        min_price: float = 0.0,
        max_price: float | None = float("inf"),
        category: str = "",
        max_results: int | None = None,
    ) -> list[RankedResult]:
        """Return ranked results for ``query`` within the price and category filters."""

    def category_stats(self) -> dict[str, int]:  # pragma: no cover - Protocol only
        """Return item counts per category, sorted case-insensitively."""

    def price_range(self) -> tuple[float, float]:  # pragma: no cover - Protocol only
        """Return the lowest positive and the highest price in the catalog."""

    def total_items(self) -> int:  # pragma: no cover - Protocol only
        """Return the catalog size."""
