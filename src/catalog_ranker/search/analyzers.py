"""Analyzer utilities for catalog text.

Analyzers follow a composable tokenizer/filter design: a tokenizer turns raw
text into a token stream, and filters transform or drop tokens. Two analyzers
are registered:

- ``catalog``: feeds the TF-IDF vectorizer. Keeps lowercase ASCII letters,
  digits and common French accented letters, drops short tokens and a
  bilingual stop-word list.
- ``sentiment``: feeds the Naive Bayes classifier. Keeps ASCII letters only,
  no stop words, no length filter.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int


class Analyzer(Protocol):
    """Protocol implemented by analyzers."""

    def __call__(self, text: str | None) -> list[Token]:  # pragma: no cover - interface definition
        ...

    def terms(self, text: str | None) -> list[str]:  # pragma: no cover - interface definition
        ...


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


ACCENTED_LETTERS = "àâäçéèêëïîôùûüÿœæ"

CATALOG_STOPWORDS = frozenset(
    {
        "le",
        "la",
        "les",
        "un",
        "une",
        "des",
        "du",
        "de",
        "ce",
        "cet",
        "cette",
        "et",
        "ou",
        "mais",
        "donc",
        "car",
        "ni",
        "or",
        "a",
        "à",
        "en",
        "pour",
        "sur",
        "avec",
        "sans",
        "est",
        "sont",
        "c'est",
        "il",
        "elle",
        "ils",
        "elles",
        "que",
        "qui",
        "quoi",
        "dont",
        "où",
        "plus",
        "moins",
        "très",
        "bien",
        "bon",
    }
)

CATALOG_MIN_TOKEN_LENGTH = 3

_CATALOG_STRIP = re.compile(rf"[^a-z0-9\s{ACCENTED_LETTERS}]")
_SENTIMENT_STRIP = re.compile(r"[^a-zA-Z\s]")
_NORMALIZE_STRIP = re.compile(r"[^a-z0-9\s]")


class PatternTokenizer:
    """Cleans text with a character-class pattern, then splits on whitespace.

    Args:
        strip_pattern: Characters matching this pattern are replaced.
        replacement: Replacement for stripped characters. A space splits words
            apart; an empty string glues the surrounding letters together.
        lowercase: Lowercase before stripping, for patterns that only list
            lowercase letters.
    """

    def __init__(self, strip_pattern: re.Pattern[str], *, replacement: str = " ", lowercase: bool = False) -> None:
        self.strip_pattern = strip_pattern
        self.replacement = replacement
        self.lowercase = lowercase

    def __call__(self, text: str) -> Iterator[Token]:
        if self.lowercase:
            text = text.lower()
        cleaned = self.strip_pattern.sub(self.replacement, text)
        for position, word in enumerate(cleaned.split()):
            yield Token(text=word, position=position)


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.islower():
                yield token
            else:
                yield Token(text=token.text.lower(), position=token.position)


class MinLengthFilter:
    """Drops tokens shorter than ``min_length`` characters."""

    def __init__(self, min_length: int) -> None:
        self.min_length = min_length

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if len(token.text) >= self.min_length:
                yield token


class StopFilter:
    """Removes stopwords from the stream."""

    def __init__(self, stopwords: Iterable[str] | None = None) -> None:
        vocab = stopwords if stopwords is not None else CATALOG_STOPWORDS
        self.stopwords = {word.lower() for word in vocab}

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text.lower() not in self.stopwords:
                yield token


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str | None) -> list[Token]:
        if not text:
            return []
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        tokens = list(stream)
        for idx, token in enumerate(tokens):  # normalize positions post-filtering
            token.position = idx
        return tokens

    def terms(self, text: str | None) -> list[str]:
        return [token.text for token in self(text)]


class CatalogAnalyzer(AnalyzerPipeline):
    """Analyzer used to build and query the product vector space."""

    def __init__(self, *, stopwords: Iterable[str] | None = None, min_length: int = CATALOG_MIN_TOKEN_LENGTH) -> None:
        super().__init__(
            PatternTokenizer(_CATALOG_STRIP, replacement=" ", lowercase=True),
            [MinLengthFilter(min_length), StopFilter(stopwords)],
        )


class SentimentAnalyzer(AnalyzerPipeline):
    """Letters-only analyzer for review sentiment."""

    def __init__(self) -> None:
        super().__init__(
            PatternTokenizer(_SENTIMENT_STRIP, replacement=""),
            [LowercaseFilter()],
        )


def normalize_text(text: str | None) -> str:
    """Lowercase, keep only ASCII letters, digits and whitespace, and trim.

    Used for the substring checks of the ranking bonuses, where the whole
    string matters rather than its tokens.
    """
    if not text:
        return ""
    return _NORMALIZE_STRIP.sub("", text.lower()).strip()


_ANALYZER_FACTORIES: dict[str, Callable[[], Analyzer]] = {
    "default": lambda: CatalogAnalyzer(),
    "catalog": lambda: CatalogAnalyzer(),
    "sentiment": lambda: SentimentAnalyzer(),
}


def get_analyzer(name: str | None) -> Analyzer:
    """Return analyzer by name, defaulting to the catalog analyzer."""

    if name is None:
        return _ANALYZER_FACTORIES["default"]()
    normalized = name.lower()
    if normalized not in _ANALYZER_FACTORIES:
        msg = f"Unknown analyzer '{name}'. Available: {sorted(_ANALYZER_FACTORIES)}"
        raise ValueError(msg)
    return _ANALYZER_FACTORIES[normalized]()
