"""Vector similarity helpers."""

from __future__ import annotations

from collections.abc import Sequence
import logging

import numpy as np


logger = logging.getLogger(__name__)


def cosine_similarity(vec1: np.ndarray | Sequence[float], vec2: np.ndarray | Sequence[float]) -> float:
    """Calculate cosine similarity between two vectors.

    Returns 0.0 when either vector is empty or has zero magnitude, and when
    the lengths differ. A length mismatch means one vector came from a stale
    model; it is logged and scored as unrelated rather than raised.

    Args:
        vec1: First vector
        vec2: Second vector

    Returns:
        Similarity in [-1.0, 1.0]; TF-IDF vectors with non-negative weights
        stay within [0.0, 1.0].
    """
    a = np.asarray(vec1, dtype=np.float64)
    b = np.asarray(vec2, dtype=np.float64)

    if a.size == 0 or b.size == 0:
        return 0.0
    if a.shape != b.shape:
        logger.debug("Cosine similarity skipped for mismatched vectors", extra={"left": a.size, "right": b.size})
        return 0.0

    magnitude1 = float(np.linalg.norm(a))
    magnitude2 = float(np.linalg.norm(b))
    if magnitude1 == 0 or magnitude2 == 0:
        return 0.0

    return float(np.dot(a, b)) / (magnitude1 * magnitude2)
