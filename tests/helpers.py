"""Canned-response judges and result builders shared by the tests."""

from rankjudge.models import ResultItem


class StubJudge:
    """Returns canned responses in call order and records every call."""

    def __init__(self, responses, elapsed_ms: float = 5.0):
        self.responses = list(responses)
        self.elapsed_ms = elapsed_ms
        self.calls: list[tuple[str, str]] = []

    def judge(self, query: str, passage: str) -> tuple[str, float]:
        self.calls.append((query, passage))
        return self.responses[len(self.calls) - 1], self.elapsed_ms


class RaisingJudge(StubJudge):
    """Like StubJudge, but raises on the listed (1-based) calls."""

    def __init__(self, responses, fail_on: set[int], exc: Exception | None = None):
        super().__init__(responses)
        self.fail_on = fail_on
        self.exc = exc or ConnectionError("boom")

    def judge(self, query: str, passage: str) -> tuple[str, float]:
        if len(self.calls) + 1 in self.fail_on:
            self.calls.append((query, passage))
            raise self.exc
        return super().judge(query, passage)


def make_results(n: int, prefix: str = "doc") -> list[ResultItem]:
    return [
        ResultItem(
            title=f"{prefix} {i}",
            description=f"description of {prefix} {i}",
            url=f"https://example.com/{prefix}/{i}",
        )
        for i in range(n)
    ]
