"""Caller-owned selections built from ranked results.

Each instance is owned by whoever creates it (a session, a view, a test);
there is no process-wide registry and nothing is written to disk.
"""

from __future__ import annotations

from collections.abc import Callable
import logging

from catalog_ranker.domain.results import RankedResult


logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class _ObservableSelection:
    def __init__(self) -> None:
        self._items: dict[str, RankedResult] = {}
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def contains(self, product_id: str) -> bool:
        return product_id in self._items

    def remove(self, product_id: str) -> None:
        if self._items.pop(product_id, None) is not None:
            logger.debug("Removed %s from %s", product_id, type(self).__name__)
        self._notify()

    def __len__(self) -> int:
        return len(self._items)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class ComparisonSelection(_ObservableSelection):
    """Up to ``max_selection`` results picked for side-by-side comparison."""

    DEFAULT_MAX_SELECTION = 3

    def __init__(self, max_selection: int = DEFAULT_MAX_SELECTION) -> None:
        if max_selection < 1:
            raise ValueError(f"max_selection must be positive, got {max_selection}")
        super().__init__()
        self.max_selection = max_selection

    def add(self, result: RankedResult) -> bool:
        """Select ``result``; returns False when the selection is already full.

        Re-adding a product that is already selected refreshes its entry and
        always succeeds.
        """
        if result.product_id not in self._items and len(self._items) >= self.max_selection:
            return False
        self._items[result.product_id] = result
        self._notify()
        return True

    def selected(self) -> list[RankedResult]:
        return list(self._items.values())

    def clear(self) -> None:
        self._items.clear()
        self._notify()


class Wishlist(_ObservableSelection):
    """Results the user wants to keep an eye on."""

    def add(self, result: RankedResult | None) -> None:
        if result is None or not result.product_id:
            return
        self._items[result.product_id] = result
        self._notify()

    def items(self) -> list[RankedResult]:
        return list(self._items.values())
