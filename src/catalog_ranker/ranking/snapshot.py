"""Immutable catalog snapshot shared by concurrent queries."""

from __future__ import annotations

from collections.abc import Iterable
import copy
from dataclasses import dataclass
import logging
from uuid import uuid4

import numpy as np

from catalog_ranker.domain.model import Product
from catalog_ranker.search.analyzers import normalize_text
from catalog_ranker.search.vectorizer import FittedTfidfVectorizer, TfidfVectorizer


logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class CatalogSnapshot:
    """Products plus everything derived from them once per catalog version.

    All per-product sequences are aligned by position with ``products``.
    ``item_vectors`` is a read-only ``(len(products), vocab_size)`` matrix.
    """

    snapshot_id: str
    products: tuple[Product, ...]
    vectorizer: FittedTfidfVectorizer
    item_vectors: np.ndarray
    normalized_titles: tuple[str, ...]
    normalized_documents: tuple[str, ...]
    normalized_categories: tuple[str, ...]

    @classmethod
    def build(cls, products: Iterable[Product]) -> CatalogSnapshot:
        """Fit the vectorizer on the catalog and cache one vector per product.

        Products are deep-copied, so later edits to the caller's entities
        (``add_review``) only reach the ranking through a new snapshot.
        """
        catalog = tuple(copy.deepcopy(product) for product in products)
        corpus = [product.document_text() for product in catalog]

        vectorizer = TfidfVectorizer().fit(corpus)
        item_vectors = vectorizer.transform_many(corpus)
        item_vectors.setflags(write=False)

        snapshot = cls(
            snapshot_id=uuid4().hex[:12],
            products=catalog,
            vectorizer=vectorizer,
            item_vectors=item_vectors,
            normalized_titles=tuple(normalize_text(product.title) for product in catalog),
            normalized_documents=tuple(normalize_text(text) for text in corpus),
            normalized_categories=tuple(normalize_text(product.category) for product in catalog),
        )
        logger.info(
            "Catalog snapshot built",
            extra={
                "snapshot_id": snapshot.snapshot_id,
                "items": len(catalog),
                "vocabulary_size": vectorizer.vocab_size,
            },
        )
        return snapshot

    def __len__(self) -> int:
        return len(self.products)

    def category_stats(self) -> dict[str, int]:
        """Count products per category, merging categories that differ only in case.

        The first spelling seen names the bucket; keys come back sorted
        case-insensitively. Products without a category are skipped.
        """
        counts: dict[str, int] = {}
        spellings: dict[str, str] = {}
        for product in self.products:
            category = product.category
            if not category:
                continue
            key = category.lower()
            label = spellings.setdefault(key, category)
            counts[label] = counts.get(label, 0) + 1
        return dict(sorted(counts.items(), key=lambda item: item[0].lower()))

    def price_range(self) -> tuple[float, float]:
        """Return ``(min, max)`` over positive prices, ``(0.0, 0.0)`` if there are none."""
        prices = [product.price for product in self.products if product.price > 0]
        if not prices:
            return 0.0, 0.0
        return min(prices), max(prices)
