"""Parse judge responses into relevance grades."""

import re

from rankjudge.judge import ERROR_PREFIX

# Lenient to casing, stray whitespace and any reasoning around the marker.
_FINAL_SCORE_RE = re.compile(r"##\s*final\s*score\s*:\s*([0-3])\b", re.IGNORECASE)


def extract_score(raw: str | None) -> int | None:
    """Return the grade 0-3, or None when the response has no valid marker."""
    match = _FINAL_SCORE_RE.search(raw or "")
    if not match:
        return None
    return int(match.group(1))


def is_judge_error(raw: str | None) -> bool:
    """True when the judge call itself failed (transport or model error)."""
    return bool(raw) and raw.startswith(ERROR_PREFIX)
