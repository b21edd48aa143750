"""Command-line interface: judge two result files for one query."""

import argparse
import json
import sys
from collections.abc import Mapping
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from rankjudge.config import EVAL_DEPTH
from rankjudge.evaluate import evaluate, fallback_report
from rankjudge.judge import OllamaJudge, get_judge
from rankjudge.models import EvaluationReport, JudgedGrade, ResultItem
from rankjudge.ui import (
    console,
    fmt_duration,
    make_table,
    render_table,
    report,
    report_error,
    report_mode,
    report_progress,
)

_RESULTS_ADAPTER = TypeAdapter(list[ResultItem])


class ResultsFileError(Exception):
    """Raised when a results file cannot be read or validated."""


def load_results(path: Path) -> list[ResultItem]:
    """Load a JSON array of results, or an object with a "results" array."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ResultsFileError(f"{path}: file not found") from e
    except json.JSONDecodeError as e:
        raise ResultsFileError(f"{path}: invalid JSON ({e.msg})") from e
    if isinstance(data, dict):
        data = data.get("results")
    try:
        return _RESULTS_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise ResultsFileError(f"{path}: {e.error_count()} invalid field(s)") from e


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rankjudge",
        description="Compare two search result lists with an LLM relevance judge",
    )
    parser.add_argument("query", help="Search query text")
    parser.add_argument("results_a", type=Path, help="JSON file with results for DB 1")
    parser.add_argument("results_b", type=Path, help="JSON file with results for DB 2")
    parser.add_argument("--model", help="Judge model (default: configured model)")
    parser.add_argument("--host", help="Judge server URL")
    parser.add_argument(
        "--json", action="store_true", help="Print the report as JSON"
    )
    return parser


def _histogram(counts: Mapping[int, int]) -> str:
    return " ".join(f"{g}★:{counts[g]}" for g in (3, 2, 1, 0))


def render_report(result: EvaluationReport) -> None:
    table = make_table()
    table.add_column("DB")
    table.add_column("Score", justify="right")
    table.add_column("nDCG@5", justify="right")
    table.add_column("nDCG@10", justify="right")
    table.add_column("Grades")
    table.add_column("Errors", justify="right")
    for name, db in (("1", result.db1), ("2", result.db2)):
        m = db.metrics
        agg = db.scored
        table.add_row(
            name,
            f"{db.score:.3f}" if db.score is not None else "-",
            f"{m.ndcg5:.3f}" if m else "-",
            f"{m.ndcg10:.3f}" if m else "-",
            _histogram(agg.counts) if agg else "-",
            str(agg.errors) if agg else "-",
        )
    render_table(table, gap_before=True)
    for db in (result.db1, result.db2):
        if db.feedback:
            report("feedback", db.feedback)
    report("judge", fmt_duration(result.duration_ms / 1000.0).strip())


def _evaluate_with_progress(
    query: str,
    results_a: list[ResultItem],
    results_b: list[ResultItem],
    judge: OllamaJudge,
) -> EvaluationReport:
    n_items = min(len(results_a), EVAL_DEPTH) + min(len(results_b), EVAL_DEPTH)
    with report_progress("judging") as progress:
        task = progress.add_task("", total=n_items)

        def _advance(_db: int, _judged: JudgedGrade) -> None:
            progress.advance(task)

        return evaluate(query, results_a, results_b, judge, on_item_judged=_advance)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = _build_parser().parse_args(argv)

    try:
        results_a = load_results(args.results_a)
        results_b = load_results(args.results_b)
    except ResultsFileError as e:
        report_error("cannot read results", cause=str(e), action="pass a JSON list of results")
        sys.exit(1)

    judge = get_judge(model=args.model, host=args.host)
    if judge is None:
        if args.json:
            console.print_json(data=fallback_report().to_dict())
            return
        report_mode("unavailable", "no judge configured")
        report("action", "set OLLAMA_API_KEY or RANKJUDGE_JUDGE_HOST")
        return

    try:
        if args.json:
            result = evaluate(args.query, results_a, results_b, judge)
            console.print_json(data=result.to_dict())
            return
        report_mode("judge", judge.model)
        result = _evaluate_with_progress(args.query, results_a, results_b, judge)
    except KeyboardInterrupt:
        sys.exit(130)
    render_report(result)
