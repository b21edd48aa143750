"""LLM relevance judge client.

One chat request per (query, passage) pair. Failures never raise: they
come back as an ``ERR:``-prefixed text so a single bad passage cannot
abort the evaluation of the rest of its list.
"""

import time
from typing import Protocol

import ollama

from rankjudge import config

ERROR_PREFIX = "ERR:"

JUDGE_PROMPT = """Given a query and a passage, you must provide a score on an integer scale of 0 to 3 with the following meanings:
0 = represent that the passage has nothing to do with the query,
1 = represents that the passage seems related to the query but does not answer it,
2 = represents that the passage has some answer for the query, but the answer may be a bit unclear, or hidden amongst extraneous information and
3 = represents that the passage is dedicated to the query and contains the exact answer.

Important Instruction: Assign category 1 if the passage is somewhat related to the topic but not completely, category 2 if passage presents something very important related to the entire topic but also has some extra information and category 3 if the passage only and entirely refers to the topic. If none of the above satisfies give it category 0.

Query: {query}
Passage: {passage}

Split this problem into steps:
Consider the underlying intent of the search.
Measure how well the content matches a likely intent of the query (M).
Measure how trustworthy the passage is (T).
Consider the aspects above and the relative importance of each, and decide on a final score (O). Final score must be an integer value only.
Do not provide any code in result. Provide each score in the format of: ##final score: score without providing any reasoning.
"""


class Judge(Protocol):
    """Text in, text out, possibly failing."""

    def judge(self, query: str, passage: str) -> tuple[str, float]:
        """Return (raw_text, elapsed_ms)."""
        ...


def build_prompt(query: str, passage: str) -> str:
    return JUDGE_PROMPT.format(query=query, passage=passage)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


class OllamaJudge:
    """Judge backed by an ollama chat model (local server or ollama cloud)."""

    def __init__(
        self,
        model: str | None = None,
        host: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ):
        self.model = model or config.get_judge_model()
        self.host = host
        self.api_key = api_key
        self.timeout = timeout if timeout is not None else config.get_judge_timeout()
        self._client: ollama.Client | None = None

    def _get_client(self) -> ollama.Client:
        if self._client is None:
            headers = (
                {"Authorization": f"Bearer {self.api_key}"} if self.api_key else None
            )
            self._client = ollama.Client(
                host=self.host, headers=headers, timeout=self.timeout
            )
        return self._client

    def judge(self, query: str, passage: str) -> tuple[str, float]:
        prompt = build_prompt(query, passage)
        start = time.perf_counter()
        try:
            response = self._get_client().chat(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                options={"temperature": 0},
            )
            text = response.message.content or ""
        except Exception as e:
            return f"{ERROR_PREFIX}{e}", _elapsed_ms(start)
        return text, _elapsed_ms(start)


def get_judge(model: str | None = None, host: str | None = None) -> OllamaJudge | None:
    """Build the configured judge, or None when judging is unavailable."""
    if not (host or config.judge_configured()):
        return None
    return OllamaJudge(
        model=model,
        host=host or config.get_judge_host(),
        api_key=config.get_judge_api_key(),
    )
