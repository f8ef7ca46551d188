"""Multinomial Naive Bayes sentiment scoring for review text.

The classifier is seeded with a small hand-written corpus of product-review
sentences so it works without external training data. It is independent of
the ranking path: nothing in the composite score calls it.

Scoring:
- Log priors ``ln(class_docs / total_docs)``
- Laplace-smoothed (k=1) log likelihoods for every known token
- ``2 / (1 + exp(-(log_pos - log_neg))) - 1``, a logistic squash of the
  log-odds into (-1, 1)
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import logging
import math
from typing import Literal

from catalog_ranker.search.analyzers import Analyzer, get_analyzer


logger = logging.getLogger(__name__)

SentimentLabel = Literal["positive", "negative", "neutral"]

POSITIVE_SEED: tuple[str, ...] = (
    "The battery life is amazing and lasts all day",
    "Fast shipping and excellent quality product",
    "I love this phone it works perfectly",
    "Great value for the price recommmended",
    "Screen is beautiful and very bright",
    "Sound quality is superb and crisp",
    "Easy to setup and very user friendly",
    "Best purchase I have made this year",
    "Customer service was helpful and polite",
    "Durable and well built construction",
    "Super fast processor and lots of ram",
    "Camera takes stunning photos at night",
    "Very happy with this performance",
    "Exceeded my expectations in every way",
    "Highly recommend to anyone looking for quality",
)

NEGATIVE_SEED: tuple[str, ...] = (
    "The screen cracked after one day of use",
    "Terrible battery life drains in an hour",
    "Slow shipping and arrived damaged",
    "Waste of money do not buy this garbage",
    "Customer service was rude and unhelpful",
    "Product stopped working after a week",
    "Poor quality materials feel very cheap",
    "Overheating issues when playing games",
    "The sound is muffled and quiet",
    "Hard to use and keeping freezing",
    "Worst experience ever avoided this brand",
    "Not worth the price at all rip off",
    "Buttons are loose and rattle",
    "Software is buggy and crashes often",
    "False advertising does not have features",
)

SEED_CORPUS: tuple[tuple[str, bool], ...] = tuple((text, True) for text in POSITIVE_SEED) + tuple(
    (text, False) for text in NEGATIVE_SEED
)


@dataclass
class _ClassStats:
    word_counts: Counter[str] = field(default_factory=Counter)
    total_words: int = 0
    documents: int = 0


class NaiveBayesSentimentClassifier:
    """Positive/negative review scorer.

    Args:
        seed: Train on ``SEED_CORPUS`` at construction.
        analyzer: Tokenizer for training and prediction; the letters-only
            sentiment analyzer by default.
    """

    def __init__(self, *, seed: bool = True, analyzer: Analyzer | None = None) -> None:
        self.analyzer = analyzer or get_analyzer("sentiment")
        self._positive = _ClassStats()
        self._negative = _ClassStats()
        self._vocabulary: set[str] = set()
        if seed:
            for text, is_positive in SEED_CORPUS:
                self.train(text, is_positive)
            logger.debug("Sentiment classifier seeded", extra={"documents": len(SEED_CORPUS)})

    @property
    def vocabulary_size(self) -> int:
        return len(self._vocabulary)

    @property
    def document_count(self) -> int:
        return self._positive.documents + self._negative.documents

    def train(self, text: str | None, is_positive: bool) -> None:
        """Add one labeled document; empty text is ignored."""
        if not text:
            return
        stats = self._positive if is_positive else self._negative
        stats.documents += 1
        for token in self.analyzer.terms(text):
            stats.word_counts[token] += 1
            stats.total_words += 1
            self._vocabulary.add(token)

    def predict(self, text: str | None) -> float:
        """Return a sentiment score in (-1, 1); positive values mean positive sentiment.

        Empty text scores exactly 0.0, as does any text while either class
        has no training documents.
        """
        if not text:
            return 0.0
        if not self._positive.documents or not self._negative.documents:
            return 0.0

        total_docs = self.document_count
        vocab_size = len(self._vocabulary)
        log_pos = math.log(self._positive.documents / total_docs)
        log_neg = math.log(self._negative.documents / total_docs)

        for token in self.analyzer.terms(text):
            if token not in self._vocabulary:
                continue
            log_pos += math.log((self._positive.word_counts[token] + 1) / (self._positive.total_words + vocab_size))
            log_neg += math.log((self._negative.word_counts[token] + 1) / (self._negative.total_words + vocab_size))

        # 2 / (1 + e^-x) - 1 == tanh(x / 2), without overflow for large |x|
        return math.tanh((log_pos - log_neg) / 2.0)

    def predict_label(self, text: str | None) -> SentimentLabel:
        score = self.predict(text)
        if score > 0:
            return "positive"
        if score < 0:
            return "negative"
        return "neutral"
