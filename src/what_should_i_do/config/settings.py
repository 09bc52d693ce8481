import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load .env once, globally
load_dotenv()

# Project root (independent of current working directory).
PROJECT_ROOT = Path(__file__).resolve().parents[3]

DEFAULT_OPENROUTER_URL = "https://openrouter.ai/api/v1"
DEFAULT_OPENROUTER_MODEL = "anthropic/claude-3.5-sonnet"
DEFAULT_TRANSLATE_URL = "https://api.mymemory.translated.net/get"


def resolve_path(value: str) -> Path:
    """
    Resolve a path from ENV.
    Relative paths are resolved against PROJECT_ROOT.
    """
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number, got {raw!r}") from None


def load_api_keys() -> List[str]:
    # Numbered keys keep their order; a comma list is appended after them.
    keys = [os.getenv(f"OPENROUTER_API_KEY{i}", "").strip() for i in range(1, 4)]
    extra = os.getenv("OPENROUTER_API_KEYS", "")
    keys.extend(part.strip() for part in extra.split(","))
    seen: List[str] = []
    for key in keys:
        if key and key not in seen:
            seen.append(key)
    return seen


@dataclass(frozen=True)
class Settings:
    api_keys: List[str] = field(default_factory=list)
    openrouter_base_url: str = DEFAULT_OPENROUTER_URL
    openrouter_model: str = DEFAULT_OPENROUTER_MODEL
    app_url: str = "http://localhost:3000"
    analyzer: str = "openrouter"
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "qwen3:8b"
    remote_timeout: float = 12.0
    rule_profile: str = "standard"
    summary_strategy: Optional[str] = None
    translate_url: str = DEFAULT_TRANSLATE_URL
    log_level: str = "INFO"
    log_file: Optional[Path] = None


def load_settings() -> Settings:
    log_file = os.getenv("WSID_LOG_FILE")
    return Settings(
        api_keys=load_api_keys(),
        openrouter_base_url=os.getenv("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_URL),
        openrouter_model=os.getenv("OPENROUTER_MODEL", DEFAULT_OPENROUTER_MODEL),
        app_url=os.getenv("APP_URL") or os.getenv("NEXT_PUBLIC_APP_URL") or "http://localhost:3000",
        analyzer=os.getenv("WSID_ANALYZER", "openrouter").strip().lower(),
        ollama_host=os.getenv("OLLAMA_HOST", "http://localhost:11434"),
        ollama_model=os.getenv("OLLAMA_MODEL", "qwen3:8b"),
        remote_timeout=_env_float("WSID_REMOTE_TIMEOUT", 12.0),
        rule_profile=os.getenv("WSID_RULE_PROFILE", "standard").strip().lower(),
        summary_strategy=(os.getenv("WSID_SUMMARY_STRATEGY") or None),
        translate_url=os.getenv("WSID_TRANSLATE_URL", DEFAULT_TRANSLATE_URL),
        log_level=os.getenv("WSID_LOG_LEVEL", "INFO").upper(),
        log_file=resolve_path(log_file) if log_file else None,
    )
