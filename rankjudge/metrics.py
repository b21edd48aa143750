"""Ranking quality metrics over position-ordered relevance grades.

- gain: exponential graded-relevance gain, 2^rel - 1
- DCG@k / nDCG@k against a pooled ideal ranking (diagnostic)
- Expected utility: geometric position weights, normalized to 0-10
"""

import math
from collections.abc import Sequence

from rankjudge.config import EU_ALPHA, EVAL_DEPTH, MAX_GRADE
from rankjudge.models import RankingMetrics


def gain(rel: int) -> float:
    return 2.0**rel - 1


def dcg_at_k(grades: Sequence[int], k: int) -> float:
    """Discounted Cumulative Gain; positions past the list contribute nothing."""
    return sum(gain(rel) / math.log2(i + 2) for i, rel in enumerate(grades[:k]))


def ndcg_at_k(grades: Sequence[int], pooled: Sequence[int], k: int) -> float:
    """Normalized DCG against the pooled grades sorted descending.

    The sort is stable, so ties keep pool order (dataset 1, then dataset 2).
    """
    ideal = sorted(pooled, reverse=True)
    idcg = dcg_at_k(ideal, k)
    return dcg_at_k(grades, k) / idcg if idcg > 0 else 0.0


def expected_utility(
    grades: Sequence[int], alpha: float = EU_ALPHA, depth: int = EVAL_DEPTH
) -> float:
    """Expected utility out of 10.

    Each position i has weight alpha^i; the denominator assumes the
    maximum gain at every position, so only a full list of top grades
    reaches 10. Missing positions count as grade 0.
    """
    num = 0.0
    weight_sum = 0.0
    for i in range(depth):
        p = alpha**i
        rel = grades[i] if i < len(grades) else 0
        num += p * gain(rel)
        weight_sum += p
    denom = weight_sum * gain(MAX_GRADE)
    return num / denom * 10 if denom > 0 else 0.0


def compute_metrics(grades: Sequence[int], pooled: Sequence[int]) -> RankingMetrics:
    """All metrics for one dataset; ``pooled`` spans both compared datasets."""
    return RankingMetrics(
        ndcg5=ndcg_at_k(grades, pooled, 5),
        ndcg10=ndcg_at_k(grades, pooled, 10),
        neu=expected_utility(grades, EU_ALPHA, EVAL_DEPTH),
    )
