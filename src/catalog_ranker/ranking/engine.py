"""Catalog recommendation engine.

Ranks products against a free-text query inside a price window and an
optional category. The catalog is fitted once into an immutable
``CatalogSnapshot``; every query reads the snapshot that was current when it
started, so reloading a catalog never disturbs queries already in flight.

Per query:
1. Filter by price window and category
2. Vectorize the query once
3. Score each product: cosine similarity, title/category bonuses, fuzzy
   keyword rescue (products matching none of the keywords are dropped),
   clamped to ``max_similarity``
4. Blend similarity, rating, review volume and price into a composite score
5. Stable sort, assign ranks, drop low scores, truncate
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging
import math
import threading

import numpy as np

from catalog_ranker.config import Settings, get_settings
from catalog_ranker.domain.model import Product
from catalog_ranker.domain.results import RankedResult, ScoredItem
from catalog_ranker.observability.context import bind_snapshot, restore_trace_context
from catalog_ranker.observability.metrics import (
    CATALOG_FIT_LATENCY,
    CATALOG_ITEM_COUNT,
    RANKING_LATENCY,
    RANKING_REQUESTS,
    RANKING_RESULT_COUNT,
    track_latency,
)
from catalog_ranker.observability.tracing import create_span
from catalog_ranker.ranking.snapshot import CatalogSnapshot
from catalog_ranker.search.analyzers import normalize_text
from catalog_ranker.search.fuzzy import fuzzy_contains
from catalog_ranker.search.similarity import cosine_similarity


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryTerms:
    """Query text prepared once per ranking call."""

    normalized: str
    vector: np.ndarray
    tokens: tuple[str, ...]
    keywords: tuple[str, ...]

    @property
    def is_blank(self) -> bool:
        return not self.normalized


@dataclass(frozen=True)
class ScoreBreakdown:
    """Every component that went into one product's score."""

    product_id: str
    cosine: float
    title_bonus: float
    category_bonus: float
    fuzzy_bonus: float
    keyword_matches: int
    similarity: float
    composite: float
    excluded: bool = False


class RecommendationEngine:
    """TF-IDF backed ranking engine over a product catalog.

    Args:
        products: Catalog to fit immediately. When omitted the engine starts
            not ready and ``load`` must be called before queries return
            anything.
        settings: Ranking weights and thresholds; process settings by default.
        name: Label used for metrics.
    """

    def __init__(
        self,
        products: Iterable[Product] | None = None,
        *,
        settings: Settings | None = None,
        name: str = "default",
    ) -> None:
        self.settings = settings or get_settings()
        self.name = name
        self._snapshot: CatalogSnapshot | None = None
        self._load_lock = threading.Lock()
        if products is not None:
            self.load(products)

    @property
    def is_ready(self) -> bool:
        return self._snapshot is not None

    @property
    def snapshot(self) -> CatalogSnapshot | None:
        return self._snapshot

    def load(self, products: Iterable[Product]) -> CatalogSnapshot:
        """Fit a new catalog snapshot and make it the active one.

        Loads are serialized; queries keep using the previous snapshot until
        the new one is fully built.
        """
        with self._load_lock:
            with (
                create_span("catalog.fit", attributes={"engine": self.name}) as span,
                track_latency(CATALOG_FIT_LATENCY, engine=self.name),
            ):
                snapshot = CatalogSnapshot.build(products)
                span.set_attribute("catalog.items", len(snapshot))
            self._snapshot = snapshot
            CATALOG_ITEM_COUNT.labels(engine=self.name).set(len(snapshot))
        return snapshot

    def get_recommendations(
        self,
        query: str,
        min_price: float = 0.0,
        max_price: float | None = math.inf,
        category: str = "",
        max_results: int | None = None,
    ) -> list[RankedResult]:
        """Return ranked results for ``query``.

        Results are sorted by non-increasing score with 1-based consecutive
        ranks, all at or above ``min_score_threshold``, at most
        ``max_results`` long. ``max_price=None`` means no upper bound. An
        engine without a fitted catalog returns an empty list.
        """
        snapshot = self._snapshot
        if snapshot is None:
            logger.warning("Recommendations requested before the catalog was fitted", extra={"engine": self.name})
            RANKING_REQUESTS.labels(engine=self.name, status="not_ready").inc()
            return []

        limit = self.settings.default_max_results if max_results is None else max(max_results, 0)
        if max_price is None:
            max_price = math.inf

        token = bind_snapshot(snapshot.snapshot_id)
        try:
            with (
                create_span(
                    "ranking.query", attributes={"engine": self.name, "query.length": len(query or "")}
                ) as span,
                track_latency(RANKING_LATENCY, engine=self.name),
            ):
                results = self._rank(snapshot, query, min_price, max_price, category, limit)
                span.set_attribute("ranking.results", len(results))

            RANKING_REQUESTS.labels(engine=self.name, status="ok").inc()
            RANKING_RESULT_COUNT.labels(engine=self.name).observe(len(results))
            logger.debug(
                "Ranked catalog",
                extra={"query": query, "category": category, "results": len(results), "limit": limit},
            )
        finally:
            restore_trace_context(token)
        return results

    def explain(self, query: str, product_id: str) -> ScoreBreakdown | None:
        """Return the score components of one product for ``query``.

        Filters are not applied. Returns None when the engine is not ready
        or the product is unknown.
        """
        snapshot = self._snapshot
        if snapshot is None:
            return None
        for index, product in enumerate(snapshot.products):
            if product.id == product_id:
                return self._score_product(snapshot, index, self._prepare_query(snapshot, query))
        return None

    def category_stats(self) -> dict[str, int]:
        snapshot = self._snapshot
        return snapshot.category_stats() if snapshot is not None else {}

    def price_range(self) -> tuple[float, float]:
        snapshot = self._snapshot
        return snapshot.price_range() if snapshot is not None else (0.0, 0.0)

    def total_items(self) -> int:
        snapshot = self._snapshot
        return len(snapshot) if snapshot is not None else 0

    def composite_score(self, product: Product, similarity: float) -> float:
        """Blend similarity with rating, review volume and price on fixed scales."""
        settings = self.settings
        rating_score = product.avg_rating / settings.max_rating
        review_score = min(product.review_count / settings.review_reference, 1.0)
        price_score = 1.0 - min(product.price / settings.price_reference, 1.0)
        return (
            similarity * settings.similarity_weight
            + rating_score * settings.rating_weight
            + review_score * settings.review_weight
            + price_score * settings.price_weight
        )

    def _rank(
        self,
        snapshot: CatalogSnapshot,
        query: str,
        min_price: float,
        max_price: float,
        category: str,
        limit: int,
    ) -> list[RankedResult]:
        if limit <= 0:
            return []
        candidates = self._filter(snapshot, min_price, max_price, category)
        if not candidates:
            return []

        terms = self._prepare_query(snapshot, query)
        scored: list[ScoredItem[Product]] = []
        for index in candidates:
            breakdown = self._score_product(snapshot, index, terms)
            if breakdown.excluded:
                continue
            scored.append(ScoredItem(snapshot.products[index], breakdown.composite))

        # list.sort is stable, so equal scores keep catalog order
        scored.sort(key=lambda entry: entry.score, reverse=True)

        threshold = self.settings.min_score_threshold
        results: list[RankedResult] = []
        for rank, entry in enumerate(scored, start=1):
            if entry.score < threshold:
                continue
            results.append(self._to_result(entry, rank))
            if len(results) >= limit:
                break
        return results

    def _filter(self, snapshot: CatalogSnapshot, min_price: float, max_price: float, category: str) -> list[int]:
        wanted = category.lower() if self.settings.is_category_filter(category) else None
        kept: list[int] = []
        for index, product in enumerate(snapshot.products):
            if product.price < min_price or product.price > max_price:
                continue
            if wanted is not None and (product.category or "").lower() != wanted:
                continue
            kept.append(index)
        return kept

    def _prepare_query(self, snapshot: CatalogSnapshot, query: str | None) -> QueryTerms:
        normalized = normalize_text(query)
        tokens = tuple(normalized.split())
        min_length = self.settings.min_keyword_length
        return QueryTerms(
            normalized=normalized,
            vector=snapshot.vectorizer.transform(query),
            tokens=tokens,
            keywords=tuple(token for token in tokens if len(token) >= min_length),
        )

    def _score_product(self, snapshot: CatalogSnapshot, index: int, terms: QueryTerms) -> ScoreBreakdown:
        settings = self.settings
        product = snapshot.products[index]
        cosine = cosine_similarity(terms.vector, snapshot.item_vectors[index])

        title_bonus = 0.0
        category_bonus = 0.0
        if not terms.is_blank:
            if terms.normalized in snapshot.normalized_titles[index]:
                title_bonus = settings.title_match_bonus
            category_text = snapshot.normalized_categories[index]
            # An empty category is a substring of every query and never counts
            if category_text and (terms.normalized in category_text or category_text in terms.normalized):
                category_bonus = settings.category_match_bonus

        document = snapshot.normalized_documents[index]
        matches = sum(1 for keyword in terms.keywords if fuzzy_contains(document, keyword))
        if terms.keywords and matches == 0:
            return ScoreBreakdown(
                product_id=product.id,
                cosine=cosine,
                title_bonus=title_bonus,
                category_bonus=category_bonus,
                fuzzy_bonus=0.0,
                keyword_matches=0,
                similarity=0.0,
                composite=0.0,
                excluded=True,
            )

        fuzzy_bonus = matches / len(terms.tokens) * settings.fuzzy_match_bonus if matches else 0.0
        similarity = min(settings.max_similarity, cosine + title_bonus + category_bonus + fuzzy_bonus)
        return ScoreBreakdown(
            product_id=product.id,
            cosine=cosine,
            title_bonus=title_bonus,
            category_bonus=category_bonus,
            fuzzy_bonus=fuzzy_bonus,
            keyword_matches=matches,
            similarity=similarity,
            composite=self.composite_score(product, similarity),
        )

    @staticmethod
    def _to_result(entry: ScoredItem[Product], rank: int) -> RankedResult:
        product = entry.item
        return RankedResult(
            product_id=product.id,
            title=product.title,
            price=product.price,
            image_url=product.image_url,
            link=product.link,
            description=product.description,
            avg_rating=product.avg_rating,
            review_count=product.review_count,
            category=product.category,
            score=entry.score,
            rank=rank,
        )
