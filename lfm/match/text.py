"""Token-overlap similarity between two free-text strings.

Tokens are whitespace-split and lower-cased only: no stemming, no stopword
removal, and punctuation stays attached ("case," and "case" differ).
"""

from __future__ import annotations


def tokenize(text: str) -> set:
    return {token.lower() for token in (text or "").split()}


def text_similarity(a: str, b: str) -> float:
    """Fraction of the distinct-token union that appears in both strings.

    Returns 0.0 when both strings are empty (empty union).
    """
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    hits = sum(1 for token in union if token in tokens_a and token in tokens_b)
    return hits / len(union)


__all__ = ["tokenize", "text_similarity"]
