"""TF-IDF vectorization for catalog text.

Fitting is split in two types:

- ``TfidfVectorizer`` is a builder. It accumulates document frequencies and
  the first-seen vocabulary order, one document at a time.
- ``FittedTfidfVectorizer`` is what ``fit``/``build`` return. Its vocabulary
  and IDF weights are read-only, so one instance can be shared by any number
  of concurrent queries.

IDF is ``ln(N / (1 + df))`` with no further smoothing. Terms present in
almost every document get a negative weight, which pushes them down in
similarity scoring.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
import math
from types import MappingProxyType

import numpy as np

from catalog_ranker.errors import ModelNotTrainedError
from catalog_ranker.search.analyzers import Analyzer, get_analyzer


logger = logging.getLogger(__name__)


def calculate_idf(doc_freq: int, total_docs: int) -> float:
    """Return ``ln(total_docs / (1 + doc_freq))``, or 0.0 for an empty corpus."""
    if total_docs <= 0:
        return 0.0
    return math.log(total_docs / (1 + max(doc_freq, 0)))


class TfidfVectorizer:
    """Builder that learns a vocabulary and document frequencies."""

    def __init__(self, analyzer: Analyzer | None = None) -> None:
        self.analyzer = analyzer or get_analyzer("catalog")
        self._vocabulary: dict[str, int] = {}
        self._doc_frequencies: Counter[str] = Counter()
        self._document_count = 0

    @property
    def document_count(self) -> int:
        return self._document_count

    def add_document(self, text: str | None) -> TfidfVectorizer:
        """Count each distinct term of ``text`` once toward its document frequency."""
        self._document_count += 1
        for term in dict.fromkeys(self.analyzer.terms(text)):
            if term not in self._vocabulary:
                self._vocabulary[term] = len(self._vocabulary)
            self._doc_frequencies[term] += 1
        return self

    def build(self) -> FittedTfidfVectorizer:
        """Freeze the accumulated statistics into a fitted vectorizer."""
        idf = np.fromiter(
            (calculate_idf(self._doc_frequencies[term], self._document_count) for term in self._vocabulary),
            dtype=np.float64,
            count=len(self._vocabulary),
        )
        idf.setflags(write=False)
        fitted = FittedTfidfVectorizer(
            vocabulary=MappingProxyType(dict(self._vocabulary)),
            idf=idf,
            document_count=self._document_count,
            analyzer=self.analyzer,
        )
        logger.info(
            "TF-IDF model fitted",
            extra={"documents": self._document_count, "vocabulary_size": fitted.vocab_size},
        )
        return fitted

    def fit(self, corpus: Iterable[str | None]) -> FittedTfidfVectorizer:
        """Learn vocabulary and IDF weights from ``corpus`` and return the fitted model."""
        for document in corpus:
            self.add_document(document)
        return self.build()

    def transform(self, text: str | None) -> np.ndarray:
        raise ModelNotTrainedError("Vectorizer has not been fitted yet. Call fit() and use the returned model.")


@dataclass(frozen=True, eq=False)
class FittedTfidfVectorizer:
    """Immutable TF-IDF model produced by ``TfidfVectorizer``."""

    vocabulary: Mapping[str, int]
    idf: np.ndarray
    document_count: int
    analyzer: Analyzer

    @property
    def vocab_size(self) -> int:
        return len(self.vocabulary)

    def idf_for(self, term: str) -> float:
        """Return the IDF weight of ``term``, or 0.0 when it is not in the vocabulary."""
        index = self.vocabulary.get(term)
        if index is None:
            return 0.0
        return float(self.idf[index])

    def transform(self, text: str | None) -> np.ndarray:
        """Return the TF-IDF vector of ``text``.

        Term frequency is the term count divided by the number of tokens in
        ``text``, out-of-vocabulary tokens included. Out-of-vocabulary terms
        do not get a dimension. Empty text yields a zero vector.
        """
        vector = np.zeros(self.vocab_size, dtype=np.float64)
        tokens = self.analyzer.terms(text)
        if not tokens:
            return vector

        total = len(tokens)
        for term, count in Counter(tokens).items():
            index = self.vocabulary.get(term)
            if index is None:
                continue
            vector[index] = (count / total) * self.idf[index]
        return vector

    def transform_many(self, texts: Iterable[str | None]) -> np.ndarray:
        """Stack the vectors of ``texts`` into a ``(len(texts), vocab_size)`` matrix."""
        rows = [self.transform(text) for text in texts]
        if not rows:
            return np.zeros((0, self.vocab_size), dtype=np.float64)
        return np.vstack(rows)
