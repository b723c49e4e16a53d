import os
from pathlib import Path
from dotenv import load_dotenv

from apologist.core.exceptions import ConfigException

load_dotenv()

DEFAULT_PROFILE_PATH = str(
    Path(__file__).resolve().parent.parent / "data" / "apologist_profile.json"
)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigException(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigException(f"{name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.OPENROUTER_API_KEY: str = os.getenv("OPENROUTER_API_KEY", "")
        self.OPENROUTER_URL: str = os.getenv(
            "OPENROUTER_URL", "https://openrouter.ai/api/v1/chat/completions"
        )
        self.LLM_MODEL: str = os.getenv("LLM_MODEL", "anthropic/claude-3.5-sonnet")
        self.CHROMA_PERSIST_DIR: str = os.getenv("CHROMA_PERSIST_DIR", "./chroma_db")
        self.EMBEDDING_MODEL: str = os.getenv(
            "EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2"
        )
        self.COLLECTION_NAME: str = os.getenv("COLLECTION_NAME", "apologetics")
        self.PROFILE_PATH: str = os.getenv("PROFILE_PATH", DEFAULT_PROFILE_PATH)

        # Retrieval and generation defaults
        self.TOP_K: int = _env_int("TOP_K", 5)
        self.TEMPERATURE: float = _env_float("TEMPERATURE", 0.7)
        self.MAX_TOKENS: int = _env_int("MAX_TOKENS", 2000)
        self.HISTORY_TURNS: int = _env_int("HISTORY_TURNS", 6)

        # Per-call timeouts in seconds
        self.EMBEDDING_TIMEOUT: float = _env_float("EMBEDDING_TIMEOUT", 5.0)
        self.SEARCH_TIMEOUT: float = _env_float("SEARCH_TIMEOUT", 10.0)
        self.COMPLETION_TIMEOUT: float = _env_float("COMPLETION_TIMEOUT", 10.0)
        self.COMPLETION_RETRIES: int = _env_int("COMPLETION_RETRIES", 1)

        self.RETRIEVAL_ENABLED: bool = _env_bool("RETRIEVAL_ENABLED", True)
        self.FALLBACK_ENABLED: bool = _env_bool("FALLBACK_ENABLED", True)

        self.CORS_ORIGINS: list[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        ]
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        if not 1 <= self.TOP_K <= 50:
            raise ConfigException("TOP_K must be between 1 and 50")
        if self.HISTORY_TURNS < 0:
            raise ConfigException("HISTORY_TURNS cannot be negative")
        if self.COMPLETION_RETRIES < 0:
            raise ConfigException("COMPLETION_RETRIES cannot be negative")


settings = Settings()
