"""Judge every result in the head of one ranked list."""

import time
from collections.abc import Callable, Sequence
from types import MappingProxyType

from rankjudge.config import EVAL_DEPTH, MAX_PASSAGE_CHARS, MAX_TITLE_CHARS
from rankjudge.grading import extract_score, is_judge_error
from rankjudge.judge import ERROR_PREFIX, Judge
from rankjudge.models import DatasetScore, JudgedGrade, ResultItem


def truncate(text: str | None, limit: int) -> str:
    if not text:
        return ""
    return text if len(text) <= limit else text[:limit]


def format_passage(item: ResultItem) -> str:
    """Bounded passage text sent to the judge for one result."""
    title = truncate(item.title or "Untitled", MAX_TITLE_CHARS)
    desc = truncate(item.description, MAX_PASSAGE_CHARS)
    url = f"\nURL: {item.url}" if item.url else ""
    passage = f"Title: {title}\n Description: {desc}\n URL: {url}".strip()
    return truncate(passage, MAX_PASSAGE_CHARS)


def judge_item(query: str, index: int, item: ResultItem, judge: Judge) -> JudgedGrade:
    """Judge one result. Parse failures and judge errors both grade as 0.

    A judge that raises is treated like one that returned an error text.
    """
    start = time.perf_counter()
    try:
        raw, elapsed_ms = judge.judge(query, format_passage(item))
    except Exception as e:
        raw = f"{ERROR_PREFIX}{e}"
        elapsed_ms = (time.perf_counter() - start) * 1000.0
    error = is_judge_error(raw)
    grade = None if error else extract_score(raw)
    return JudgedGrade(
        index=index,
        grade=grade if grade is not None else 0,
        raw=raw,
        elapsed_ms=elapsed_ms,
        error=error,
        parsed=grade is not None,
    )


def score_dataset(
    query: str,
    results: Sequence[ResultItem],
    judge: Judge,
    *,
    depth: int = EVAL_DEPTH,
    on_item_judged: Callable[[JudgedGrade], None] | None = None,
) -> DatasetScore:
    """Judge the first ``depth`` results sequentially and aggregate.

    Only judge-level failures count toward ``errors``; a response that
    merely lacks the score marker is graded 0 without being counted.
    """
    counts = {0: 0, 1: 0, 2: 0, 3: 0}
    total = 0
    errors = 0
    duration_ms = 0.0
    per_doc: list[JudgedGrade] = []

    for i, item in enumerate(results[:depth]):
        judged = judge_item(query, i, item, judge)
        duration_ms += judged.elapsed_ms
        if judged.error:
            errors += 1
        counts[judged.grade] += 1
        total += judged.grade
        per_doc.append(judged)
        if on_item_judged:
            on_item_judged(judged)

    per_doc.sort(key=lambda d: d.index)
    return DatasetScore(
        total=total,
        counts=MappingProxyType(counts),
        errors=errors,
        duration_ms=duration_ms,
        per_doc=tuple(per_doc),
    )
