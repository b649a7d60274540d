"""
Central configuration loaded from environment variables with sensible defaults.
Only the outer layers (pipeline, API, CLI) read settings; the matching core
takes its parameters explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


def _csv_env(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class GazetteerConfig:
    path: str = os.getenv("GAZETTEER_PATH", "data/pca-code.json")


@dataclass(frozen=True)
class NewsConfig:
    newspaper_list: str = os.getenv("NEWSPAPER_LIST_PATH", "data/newspaperList.txt")
    # Origins whose articles are published in traditional script (Hong Kong, Macau)
    traditional_origins: tuple[str, ...] = _csv_env("TRADITIONAL_ORIGINS", "81,82")
    opencc_profile: str = os.getenv("OPENCC_PROFILE", "t2s")
    csv_encoding: str = os.getenv("CSV_ENCODING", "utf-8")


@dataclass(frozen=True)
class TaggerConfig:
    max_window: int = int(os.getenv("TAGGER_MAX_WINDOW", "15"))
    min_window: int = int(os.getenv("TAGGER_MIN_WINDOW", "2"))
    sentence_delimiters: str = os.getenv("SENTENCE_DELIMITERS", "。，；,;！？!?")


@dataclass(frozen=True)
class APIConfig:
    host: str = os.getenv("API_HOST", "0.0.0.0")
    port: int = int(os.getenv("API_PORT", "8000"))
    max_text_length: int = int(os.getenv("API_MAX_TEXT_LENGTH", "100000"))


@dataclass(frozen=True)
class Settings:
    gazetteer: GazetteerConfig = field(default_factory=GazetteerConfig)
    news: NewsConfig = field(default_factory=NewsConfig)
    tagger: TaggerConfig = field(default_factory=TaggerConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
