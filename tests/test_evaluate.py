"""Tests for evaluate module."""

import math
from unittest.mock import MagicMock, patch

import pytest

from rankjudge.evaluate import evaluate, fallback_report, make_feedback
from rankjudge.judge import OllamaJudge
from rankjudge.models import UNAVAILABLE_SCORE, DatasetScore, RankingMetrics

from tests.helpers import RaisingJudge, StubJudge, make_results

ALPHA_SUM = sum(0.9**i for i in range(10))


class TestFallback:
    def test_no_judge_configured(self):
        with patch("rankjudge.judge.ollama.Client") as mock_client_cls:
            report = evaluate("vercel pricing", make_results(3), make_results(3))
        mock_client_cls.assert_not_called()

        assert not report.available
        assert report.db1.score is None
        assert report.db2.score is None
        assert report.to_dict() == {
            "db1": {"score": -1, "feedback": ""},
            "db2": {"score": -1, "feedback": ""},
            "llmDuration": 0.0,
        }

    def test_explicit_none_without_config_makes_no_calls(self):
        with patch("rankjudge.evaluate.get_judge", return_value=None) as mock_get:
            report = evaluate("q", make_results(3), make_results(3), None)
        mock_get.assert_called_once_with()
        assert report == fallback_report()

    def test_configured_judge_used_by_default(self, monkeypatch):
        judge = StubJudge(["##final score: 3"] * 2)
        monkeypatch.setattr("rankjudge.evaluate.get_judge", lambda: judge)
        report = evaluate("q", make_results(1), make_results(1))
        assert report.available
        assert len(judge.calls) == 2

    def test_sentinel_distinct_from_zero(self):
        report = evaluate("q", make_results(2), make_results(2), StubJudge(["x"] * 4))
        assert report.db1.score == 0.0
        assert report.db1.to_dict()["score"] != UNAVAILABLE_SCORE


class TestEvaluate:
    def test_vercel_pricing_scenario(self):
        judge = StubJudge(
            [
                "##final score: 3",
                "##final score: 2",
                "##final score: 0",
                "##final score: 0",
                "##final score: 0",
                "##final score: 0",
            ],
            elapsed_ms=100.0,
        )
        report = evaluate("vercel pricing", make_results(3, "a"), make_results(3, "b"), judge)

        expected_a = (7 + 0.9 * 3 + 0.81 * 0) / (ALPHA_SUM * 7) * 10
        assert report.db1.score == pytest.approx(expected_a)
        assert report.db2.score == 0.0
        assert report.db1.score > report.db2.score
        assert report.duration_ms == 600.0
        assert len(judge.calls) == 6

    def test_dataset_a_judged_before_b(self):
        judge = StubJudge(["##final score: 1"] * 4)
        evaluate("q", make_results(2, "a"), make_results(2, "b"), judge)
        titles = [p.splitlines()[0] for _, p in judge.calls]
        assert titles == ["Title: a 0", "Title: a 1", "Title: b 0", "Title: b 1"]

    def test_both_lists_capped(self):
        judge = StubJudge(["##final score: 3"] * 20)
        report = evaluate("q", make_results(40), make_results(25), judge)
        assert len(judge.calls) == 20
        assert report.db1.score == pytest.approx(10.0)
        assert report.db2.score == pytest.approx(10.0)

    def test_ndcg_uses_pooled_ideal(self):
        judge = StubJudge(["##final score: 1", "##final score: 3"])
        report = evaluate("q", make_results(1, "a"), make_results(1, "b"), judge)
        ideal = 7 + 1 / math.log2(3)
        assert report.db2.metrics.ndcg10 == pytest.approx(7 / ideal)
        assert report.db1.metrics.ndcg10 == pytest.approx(1 / ideal)

    def test_feedback_contents(self):
        judge = StubJudge(["##final score: 3", "ERR:boom", "##final score: 1", "##final score: 2"])
        report = evaluate("q", make_results(3), make_results(1), judge)

        fb1 = report.db1.feedback
        assert fb1.startswith("DB 1: 3 docs scored (top 10). Total label sum: 4.")
        assert "3★: 1, 2★: 0, 1★: 1, 0★: 1." in fb1
        assert f"Score: {report.db1.score:.3f}." in fb1
        assert "Note: 1 chunk(s)" in fb1

        fb2 = report.db2.feedback
        assert fb2.startswith("DB 2: 1 docs scored")
        assert "Note:" not in fb2

    def test_judge_failure_mid_dataset(self):
        ok = MagicMock()
        ok.message.content = "##final score: 2"
        judge = OllamaJudge(model="m", host="h")
        with patch("rankjudge.judge.ollama.Client") as mock_client_cls:
            mock_client_cls.return_value.chat.side_effect = [
                ok,
                RuntimeError("model overloaded"),
                ok,
                ok,
            ]
            report = evaluate("q", make_results(3), make_results(1), judge)

        agg = report.db1.scored
        assert agg.grades == [2, 0, 2]
        assert agg.errors == 1
        assert report.db2.scored.errors == 0
        assert mock_client_cls.return_value.chat.call_count == 4

    def test_raising_judge_does_not_escape(self):
        judge = RaisingJudge(
            ["##final score: 2", "unused", "##final score: 2", "##final score: 1"],
            fail_on={2},
        )
        report = evaluate("q", make_results(3), make_results(1), judge)

        assert len(judge.calls) == 4
        assert report.db1.scored.grades == [2, 0, 2]
        assert report.db1.scored.errors == 1
        assert "Note: 1 chunk(s)" in report.db1.feedback
        assert report.db2.scored.errors == 0
        assert report.db2.score > 0.0

    def test_progress_hook_reports_dataset(self):
        seen = []
        judge = StubJudge(["##final score: 1"] * 3)
        evaluate(
            "q",
            make_results(2),
            make_results(1),
            judge,
            on_item_judged=lambda db, judged: seen.append((db, judged.index)),
        )
        assert seen == [(1, 0), (1, 1), (2, 0)]

    def test_empty_lists(self):
        report = evaluate("q", [], [], StubJudge([]))
        assert report.db1.score == 0.0
        assert report.db2.score == 0.0
        assert report.duration_ms == 0.0


class TestMakeFeedback:
    def test_format(self):
        agg = DatasetScore(total=5, counts={0: 1, 1: 0, 2: 1, 3: 1}, errors=0)
        text = make_feedback(agg, 2, RankingMetrics(ndcg5=1.0, ndcg10=1.0, neu=4.12345))
        assert text == (
            "DB 2: 3 docs scored (top 10). Total label sum: 5. "
            "Breakdown: 3★: 1, 2★: 1, 1★: 0, 0★: 1. Score: 4.123."
        )

    def test_error_note(self):
        agg = DatasetScore(total=0, counts={0: 2, 1: 0, 2: 0, 3: 0}, errors=2)
        text = make_feedback(agg, 1, RankingMetrics(ndcg5=0.0, ndcg10=0.0, neu=0.0))
        assert text.endswith(
            "Note: 2 chunk(s) failed to parse or errored and were counted as 0."
        )
