"""Compare two result lists for one query using the LLM judge."""

from collections.abc import Callable, Sequence
from functools import partial

from rankjudge.config import EVAL_DEPTH
from rankjudge.judge import Judge, get_judge
from rankjudge.metrics import compute_metrics
from rankjudge.models import (
    DatasetReport,
    DatasetScore,
    EvaluationReport,
    JudgedGrade,
    RankingMetrics,
    ResultItem,
)
from rankjudge.scorer import score_dataset

def fallback_report() -> EvaluationReport:
    """Report used when no judge is configured: nothing was scored."""
    return EvaluationReport(
        db1=DatasetReport(score=None),
        db2=DatasetReport(score=None),
        duration_ms=0.0,
    )


def make_feedback(agg: DatasetScore, db_index: int, metrics: RankingMetrics) -> str:
    parts = [
        f"DB {db_index}: {agg.scored} docs scored (top {EVAL_DEPTH}). "
        f"Total label sum: {agg.total}.",
        f"Breakdown: 3★: {agg.counts[3]}, 2★: {agg.counts[2]}, "
        f"1★: {agg.counts[1]}, 0★: {agg.counts[0]}.",
        f"Score: {metrics.neu:.3f}.",
    ]
    if agg.errors > 0:
        parts.append(
            f"Note: {agg.errors} chunk(s) failed to parse or errored and were counted as 0."
        )
    return " ".join(parts)


def evaluate(
    query: str,
    results_a: Sequence[ResultItem],
    results_b: Sequence[ResultItem],
    judge: Judge | None = None,
    *,
    on_item_judged: Callable[[int, JudgedGrade], None] | None = None,
) -> EvaluationReport:
    """Judge both lists and score them on a 0-10 expected utility scale.

    ``judge`` defaults to the configured one. When no judge is configured
    either, a fallback report is returned without any judge call.
    ``on_item_judged`` receives the dataset number (1 or 2) and each grade.
    """
    if judge is None:
        judge = get_judge()
    if judge is None:
        return fallback_report()

    top_a = list(results_a[:EVAL_DEPTH])
    top_b = list(results_b[:EVAL_DEPTH])

    scored = []
    for db_index, top in ((1, top_a), (2, top_b)):
        hook = partial(on_item_judged, db_index) if on_item_judged else None
        scored.append(score_dataset(query, top, judge, on_item_judged=hook))
    d1, d2 = scored

    s1 = d1.grades[:EVAL_DEPTH]
    s2 = d2.grades[:EVAL_DEPTH]
    pooled = s1 + s2

    m1 = compute_metrics(s1, pooled)
    m2 = compute_metrics(s2, pooled)

    return EvaluationReport(
        db1=DatasetReport(
            score=m1.neu, feedback=make_feedback(d1, 1, m1), metrics=m1, scored=d1
        ),
        db2=DatasetReport(
            score=m2.neu, feedback=make_feedback(d2, 2, m2), metrics=m2, scored=d2
        ),
        duration_ms=d1.duration_ms + d2.duration_ms,
    )
