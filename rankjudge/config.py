"""Configuration constants and judge settings."""

import json
import os
from pathlib import Path


def _path_from_env(env_name: str, default: Path) -> Path:
    value = os.environ.get(env_name)
    return Path(value).expanduser() if value else default


RANKJUDGE_HOME = _path_from_env("RANKJUDGE_HOME", Path.home() / ".rankjudge")
_CONFIG_PATH = RANKJUDGE_HOME / "config.json"

# Ranking quality is only measured within the head of each list.
EVAL_DEPTH = 10
EU_ALPHA = 0.9
MAX_GRADE = 3

MAX_TITLE_CHARS = 200
MAX_PASSAGE_CHARS = 4000

DEFAULT_JUDGE_MODEL = "gpt-oss:120b-cloud"
DEFAULT_JUDGE_TIMEOUT = 60.0  # seconds


def _read_config() -> dict:
    if _CONFIG_PATH.exists():
        try:
            return json.loads(_CONFIG_PATH.read_text(encoding="utf-8"))
        except Exception:
            pass
    return {}


def _judge_cfg() -> dict:
    data = _read_config()
    cfg = data.get("judge") if isinstance(data, dict) else None
    return cfg if isinstance(cfg, dict) else {}


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _parse_float(value: object, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def get_judge_model() -> str:
    """Judge model name: env, then config.json, then the default."""
    env = os.environ.get("RANKJUDGE_JUDGE_MODEL")
    if env:
        return env
    model = _judge_cfg().get("model")
    return model if isinstance(model, str) and model else DEFAULT_JUDGE_MODEL


def get_judge_host() -> str | None:
    """Explicit judge server URL, or None to use the ollama default."""
    for name in ("RANKJUDGE_JUDGE_HOST", "OLLAMA_HOST"):
        value = os.environ.get(name)
        if value:
            return value
    host = _judge_cfg().get("host")
    return host if isinstance(host, str) and host else None


def get_judge_api_key() -> str | None:
    return os.environ.get("OLLAMA_API_KEY") or None


def get_judge_timeout() -> float:
    env = _env_float("RANKJUDGE_JUDGE_TIMEOUT")
    if env is not None and env > 0:
        return env
    value = _parse_float(_judge_cfg().get("timeout"), DEFAULT_JUDGE_TIMEOUT)
    return value if value > 0 else DEFAULT_JUDGE_TIMEOUT


def judge_configured() -> bool:
    """True when a credential or an explicit judge server is available."""
    return bool(get_judge_api_key() or get_judge_host())
