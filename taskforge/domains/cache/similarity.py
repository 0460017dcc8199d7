"""
Similarity Functions - Pluggable task similarity for the semantic cache.

JaccardSimilarity is the default token-overlap heuristic. EmbeddingSimilarity
computes cosine similarity over vectors from any embedding function, so a real
embedding backend can replace the heuristic without touching the cache.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable, Sequence

import numpy as np

from taskforge.domains.tasks import Task

__all__ = ["JaccardSimilarity", "EmbeddingSimilarity", "tokenize"]


def tokenize(text: str) -> set[str]:
    """Lower-cased whitespace token set."""
    return set(text.lower().split())


class JaccardSimilarity:
    """Jaccard overlap of the two inputs' word sets."""

    def __call__(self, query: Task, candidate: Task) -> float:
        words_a = tokenize(query.input)
        words_b = tokenize(candidate.input)
        union = words_a | words_b
        if not union:
            return 0.0
        return len(words_a & words_b) / len(union)


class EmbeddingSimilarity:
    """
    Cosine similarity over embeddings.

    Example:
        >>> model = SentenceTransformer("all-MiniLM-L6-v2")
        >>> similarity = EmbeddingSimilarity(model.encode)
        >>> cache = SemanticCache(similarity=similarity)
    """

    def __init__(
        self,
        embed: Callable[[str], Sequence[float] | np.ndarray],
        max_cached_vectors: int = 2048,
    ) -> None:
        """
        Initialize similarity.

        Args:
            embed: Maps text to a vector
            max_cached_vectors: Vectors kept to avoid re-embedding cached inputs
        """
        self._embed = embed
        self._max_cached = max_cached_vectors
        self._vectors: OrderedDict[str, np.ndarray] = OrderedDict()

    def __call__(self, query: Task, candidate: Task) -> float:
        a = self._vector(query.input)
        b = self._vector(candidate.input)
        norm = float(np.linalg.norm(a) * np.linalg.norm(b))
        if norm == 0.0:
            return 0.0
        # Clamp to [0, 1]; opposite vectors are simply dissimilar
        return max(0.0, min(1.0, float(np.dot(a, b)) / norm))

    def _vector(self, text: str) -> np.ndarray:
        vector = self._vectors.get(text)
        if vector is not None:
            self._vectors.move_to_end(text)
            return vector

        vector = np.asarray(self._embed(text), dtype=np.float32).ravel()
        self._vectors[text] = vector
        if len(self._vectors) > self._max_cached:
            self._vectors.popitem(last=False)
        return vector
