"""Ranking layer - catalog snapshots and the recommendation engine."""

from catalog_ranker.ranking.engine import RecommendationEngine, ScoreBreakdown
from catalog_ranker.ranking.protocol import RankingEngine
from catalog_ranker.ranking.snapshot import CatalogSnapshot


__all__ = [
    "CatalogSnapshot",
    "RankingEngine",
    "RecommendationEngine",
    "ScoreBreakdown",
]
