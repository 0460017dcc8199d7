"""
Cache Domain - Semantic memoization of task results.

This domain handles:
- Exact fingerprint lookup
- Similarity-based near-duplicate reuse
- TTL expiry and capacity eviction
"""

from .contracts import SimilarityFunction, TaskCache
from .models import CacheEntry, CacheStats
from .semantic_cache import SemanticCache
from .similarity import EmbeddingSimilarity, JaccardSimilarity, tokenize

__all__ = [
    # Contracts
    "TaskCache",
    "SimilarityFunction",
    # Models
    "CacheEntry",
    "CacheStats",
    # Implementations
    "SemanticCache",
    "JaccardSimilarity",
    "EmbeddingSimilarity",
    "tokenize",
]
