"""
Central configuration loaded from environment variables with sensible defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


@dataclass(frozen=True)
class GameConfig:
    max_guesses: int = int(os.getenv("GAME_MAX_GUESSES", "5"))
    # single | streak | lives
    run_mode: str = os.getenv("GAME_RUN_MODE", "single")
    lives: int = max(1, min(5, int(os.getenv("GAME_LIVES", "3"))))
    # Pause between the end of a round and the next one (multi-round modes)
    next_round_delay_sec: float = float(os.getenv("GAME_NEXT_ROUND_DELAY_SEC", "2.5"))
    max_suggestions: int = int(os.getenv("GAME_MAX_SUGGESTIONS", "8"))
    seed: Optional[int] = _optional_int("GAME_SEED")


@dataclass(frozen=True)
class DataConfig:
    countries_url: str = os.getenv(
        "GEOGUESS_COUNTRIES_URL",
        "https://raw.githubusercontent.com/mledoze/countries/master/countries.json",
    )
    boundaries_url: str = os.getenv(
        "GEOGUESS_BOUNDARIES_URL",
        "https://cdn.jsdelivr.net/npm/world-atlas@2/countries-50m.json",
    )
    data_dir: Path = Path(os.getenv("GEOGUESS_DATA_DIR", "data"))
    request_timeout: int = int(os.getenv("GEOGUESS_TIMEOUT", "30"))
    max_retries: int = int(os.getenv("GEOGUESS_MAX_RETRIES", "3"))
    backoff_base: float = float(os.getenv("GEOGUESS_BACKOFF_BASE", "2.0"))


@dataclass(frozen=True)
class LeaderboardConfig:
    path: Path = Path(os.getenv("LEADERBOARD_PATH", "data/leaderboard.json"))
    capacity: int = 5
    name_max_length: int = 24


@dataclass(frozen=True)
class SilhouetteConfig:
    # Viewport extent as ((x0, y0), (x1, y1)) in drawing units
    extent: tuple[tuple[float, float], tuple[float, float]] = ((18.0, 18.0), (422.0, 262.0))


@dataclass(frozen=True)
class Settings:
    game: GameConfig = field(default_factory=GameConfig)
    data: DataConfig = field(default_factory=DataConfig)
    leaderboard: LeaderboardConfig = field(default_factory=LeaderboardConfig)
    silhouette: SilhouetteConfig = field(default_factory=SilhouetteConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
