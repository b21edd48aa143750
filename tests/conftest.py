"""Keep tests away from the user's judge configuration."""

import pytest

from rankjudge import config

_JUDGE_ENV = (
    "OLLAMA_API_KEY",
    "OLLAMA_HOST",
    "RANKJUDGE_JUDGE_HOST",
    "RANKJUDGE_JUDGE_MODEL",
    "RANKJUDGE_JUDGE_TIMEOUT",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    for name in _JUDGE_ENV:
        monkeypatch.delenv(name, raising=False)
    cfg_path = tmp_path / "config.json"
    monkeypatch.setattr(config, "_CONFIG_PATH", cfg_path)
    return cfg_path
