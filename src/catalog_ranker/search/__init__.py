"""
Text scoring package.

This package provides the pure-Python building blocks of the ranking core:
- analyzers: Tokenizers and filters (lowercase, stop words, length)
- vectorizer: TF-IDF builder and frozen fitted model
- similarity: Cosine similarity
- fuzzy: Edit distance and typo-tolerant keyword containment
- sentiment: Naive Bayes review sentiment scorer
"""
