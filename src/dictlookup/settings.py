from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SEARCH_URL = "https://www.dict.cc/?s={term}"
DEFAULT_TIMEOUT = 60.0


@dataclass(slots=True)
class Settings:
    cache_path: Path
    search_url: str
    fetch_timeout: float
    log_level: str
    color: bool


def _default_cache_path() -> Path:
    return Path.home() / ".dictlookup" / "cache.txt"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    cache_raw = os.getenv("DICTLOOKUP_CACHE", "").strip()
    cache_path = Path(cache_raw).expanduser() if cache_raw else _default_cache_path()
    timeout_raw = os.getenv("DICTLOOKUP_TIMEOUT", "").strip()
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
    except ValueError as exc:
        raise ValueError(f"DICTLOOKUP_TIMEOUT must be a number, got {timeout_raw!r}") from exc
    return Settings(
        cache_path=cache_path,
        search_url=os.getenv("DICTLOOKUP_URL", "").strip() or DEFAULT_SEARCH_URL,
        fetch_timeout=timeout,
        log_level=os.getenv("DICTLOOKUP_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        color="NO_COLOR" not in os.environ,
    )
