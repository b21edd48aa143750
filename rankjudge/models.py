"""Data types shared by the judging pipeline."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict

# Reserved wire value for "judging unavailable"; computed scores are in [0, 10].
UNAVAILABLE_SCORE = -1


class ResultItem(BaseModel):
    """One search result as handed over by a provider adapter."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str | None = None
    description: str | None = None
    url: str | None = None
    # Provider relevance score; never used for judging.
    score: float | None = None


@dataclass(frozen=True)
class JudgedGrade:
    index: int
    grade: int
    raw: str = ""
    elapsed_ms: float = 0.0
    error: bool = False
    parsed: bool = True


@dataclass(frozen=True)
class DatasetScore:
    """Aggregate judgments for one ranked list."""

    total: int = 0
    counts: Mapping[int, int] = field(
        default_factory=lambda: MappingProxyType({0: 0, 1: 0, 2: 0, 3: 0})
    )
    errors: int = 0
    duration_ms: float = 0.0
    per_doc: tuple[JudgedGrade, ...] = ()

    @property
    def scored(self) -> int:
        return sum(self.counts.values())

    @property
    def grades(self) -> list[int]:
        """Grades in original rank order."""
        return [d.grade for d in sorted(self.per_doc, key=lambda d: d.index)]

    @property
    def parse_failures(self) -> int:
        return sum(1 for d in self.per_doc if not d.error and not d.parsed)


@dataclass(frozen=True)
class RankingMetrics:
    ndcg5: float
    ndcg10: float
    neu: float


@dataclass(frozen=True)
class DatasetReport:
    """Score and feedback for one dataset.

    ``score`` is None when judging could not run at all, so a degraded
    report can never be mistaken for a real low score.
    """

    score: float | None
    feedback: str = ""
    metrics: RankingMetrics | None = None
    scored: DatasetScore | None = None

    @property
    def available(self) -> bool:
        return self.score is not None

    def to_dict(self) -> dict:
        return {
            "score": self.score if self.score is not None else UNAVAILABLE_SCORE,
            "feedback": self.feedback,
        }


@dataclass(frozen=True)
class EvaluationReport:
    db1: DatasetReport
    db2: DatasetReport
    duration_ms: float = 0.0

    @property
    def available(self) -> bool:
        return self.db1.available and self.db2.available

    def to_dict(self) -> dict:
        return {
            "db1": self.db1.to_dict(),
            "db2": self.db2.to_dict(),
            "llmDuration": self.duration_ms,
        }
