"""Exception hierarchy for the ranking core.

Only ``ModelNotTrainedError`` is surfaced to callers. Sparse or malformed input
(empty text, mismatched vectors, empty catalogs) degrades to neutral values
instead of raising.
"""


class CatalogRankerError(Exception):
    """Base class for catalog ranker failures."""


class ModelNotTrainedError(CatalogRankerError, RuntimeError):
    """Raised when a vectorizer is used before it has been fitted."""
